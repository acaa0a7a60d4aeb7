"""
Graph client for KickLang Tutor
Asks the model for a concept dependency graph and parses it
"""

import json
import logging
from dataclasses import dataclass
from typing import List, Optional

import jsonschema
import networkx as nx
from openai import OpenAI
from pydantic import ValidationError

from backend.errors import GenerationFailure
from backend.models import ConceptLink, ConceptNode, LearningGraph, fallback_graph
from backend.tutor_prompts import (
    GRAPH_RESPONSE_SCHEMA, GRAPH_SCHEMA, format_graph_prompt, json_schema_format
)
from utils.config import MAX_GRAPH_NODES, MIN_GRAPH_NODES, START_NODE_ID
from utils.providers import (
    create_client, extract_message_text, get_api_call_params,
    get_model_for_task, get_token_count
)

logger = logging.getLogger(__name__)


@dataclass
class GraphResult:
    """Outcome of a graph request; error is set when the fallback was used"""
    graph: LearningGraph
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def extract_json_from_markdown(content: str) -> str:
    """
    Extract JSON content from a ```json fenced block.

    Returns the original content if no such block is found.
    """
    lines = content.split('\n')
    json_start = -1
    json_end = -1

    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped in ('```json', '```') and json_start == -1:
            json_start = i + 1
        elif stripped == '```' and json_start != -1:
            json_end = i
            break

    if json_start != -1 and json_end != -1:
        extracted = '\n'.join(lines[json_start:json_end]).strip()
        if extracted.startswith('{') and extracted.endswith('}'):
            return extracted

    return content


def check_graph(graph: LearningGraph) -> List[str]:
    """Return warnings about a parsed graph that are logged but not rejected."""
    warnings = []
    if START_NODE_ID not in graph.node_ids():
        warnings.append(f"No '{START_NODE_ID}' node in graph")
    if not MIN_GRAPH_NODES <= len(graph.nodes) <= MAX_GRAPH_NODES:
        warnings.append(
            f"Graph has {len(graph.nodes)} nodes, expected {MIN_GRAPH_NODES}-{MAX_GRAPH_NODES}"
        )
    g = nx.DiGraph()
    g.add_nodes_from(graph.node_ids())
    g.add_edges_from((link.source, link.target) for link in graph.links)
    try:
        nx.find_cycle(g, orientation="original")
        warnings.append("Graph contains a prerequisite cycle")
    except nx.exception.NetworkXNoCycle:
        pass
    return warnings


def parse_graph(raw_text: str) -> LearningGraph:
    """
    Parse model output into a LearningGraph.

    Duplicate node ids keep their first occurrence and links with an unknown
    endpoint are dropped.

    Raises:
        GenerationFailure: If the text is empty, not JSON, or does not match the schema
    """
    if not raw_text or not raw_text.strip():
        raise GenerationFailure("No data returned")

    try:
        data = json.loads(extract_json_from_markdown(raw_text))
    except json.JSONDecodeError as e:
        raise GenerationFailure(f"Invalid JSON: {e}") from e

    try:
        jsonschema.validate(data, GRAPH_SCHEMA)
    except jsonschema.ValidationError as e:
        raise GenerationFailure(f"Schema error: {e.message}") from e

    nodes: List[ConceptNode] = []
    seen = set()
    try:
        for item in data["nodes"]:
            node = ConceptNode(**item)
            if node.id in seen:
                logger.warning(f"Dropping duplicate node id '{node.id}'")
                continue
            seen.add(node.id)
            nodes.append(node)

        links: List[ConceptLink] = []
        for item in data["links"]:
            link = ConceptLink(**item)
            if link.source not in seen or link.target not in seen:
                logger.warning(f"Dropping dangling link {link.source} -> {link.target}")
                continue
            links.append(link)
    except ValidationError as e:
        raise GenerationFailure(f"Invalid graph data: {e}") from e

    graph = LearningGraph(nodes=nodes, links=links)
    for warning in check_graph(graph):
        logger.warning(warning)
    return graph


def request_graph(objective: str, client: Optional[OpenAI] = None) -> GraphResult:
    """
    Generate the concept graph for an objective.

    Never raises: on any failure the fallback graph is returned together with
    the caught error.
    """
    logger.info(f"Generating learning graph for objective: '{objective}'")
    try:
        if client is None:
            client = create_client()
        model = get_model_for_task("graph")
        params = get_api_call_params(
            model=model,
            messages=[{"role": "user", "content": format_graph_prompt(objective)}],
            response_format=json_schema_format("learning_graph", GRAPH_RESPONSE_SCHEMA),
        )
        logger.info(f"[API CALL] Reason: Graph generation | Model: {model}")
        response = client.chat.completions.create(**params)
        logger.info(f"[API RETURN] Graph generation complete | Model: {model} | Tokens: {get_token_count(response)}")

        try:
            raw_text = extract_message_text(response)
        except ValueError as e:
            raise GenerationFailure(str(e)) from e

        graph = parse_graph(raw_text)
        logger.info(f"Graph ready: {len(graph.nodes)} nodes, {len(graph.links)} links")
        return GraphResult(graph=graph)

    except Exception as e:
        error = e if isinstance(e, GenerationFailure) else GenerationFailure(f"{type(e).__name__}: {e}")
        if error is not e:
            error.__cause__ = e
        logger.error(f"Failed to generate graph: {error}")
        return GraphResult(graph=fallback_graph(), error=error)


def generate_graph(objective: str, client: Optional[OpenAI] = None) -> LearningGraph:
    """Graph for an objective, or the single-node fallback graph on failure."""
    return request_graph(objective, client).graph
