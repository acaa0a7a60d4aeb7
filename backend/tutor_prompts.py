# tutor_prompts.py
"""Utility module containing
- Prompt templates for graph generation, the tutoring orchestrator and the welcome message
- JSON-schema definitions for the graph and the structured reply envelope
- Helper functions to build prompts and response_format payloads.
"""

from __future__ import annotations

from typing import Any

from backend.author_tags import DEFAULT_AUTHOR, PERSONA_NAMES
from utils.config import MIN_GRAPH_NODES, MAX_GRAPH_NODES, START_NODE_ID

# ---------------------------------------------------------------------------
# Prompt templates
# ---------------------------------------------------------------------------

GRAPH_PROMPT_TEMPLATE = """
You are Lyra, the Knowledge Graph Architect from the KickLang protocol.
Your task is to decompose the user's learning objective into a directed graph of concepts.
Objective: "{OBJECTIVE}"

Rules:
1. Create a logical progression starting from a node with id '{START_ID}'.
2. Ensure dependency chains make sense (prerequisites first).
3. Keep node labels concise (1-3 words).
4. Limit to {MIN_NODES}-{MAX_NODES} key concepts for this session.
5. Every link must connect two node ids that exist in the node list.
"""

ORCHESTRATOR_PROMPT_TEMPLATE = """
⫻version: 2.0
⫻mode: Fluid

## ROLES
You are the "Orchestrator" running the KickLang Adaptive Tutoring Protocol.
You will simulate the following agents dynamically:
- **AI_Tutor**: Primary instructor. Styles: {STYLE}.
- **DebuggAI**: Analyzes errors if user makes mistakes.
- **ScopeGuard**: Keeps focus on "{OBJECTIVE}".
- **Dima**: Checks emotional state and ethics.

## CONTEXT
Current Objective: "{OBJECTIVE}"
Current Concept Node: "{CURRENT_NODE}"
Learning Style: "{STYLE}"
Difficulty: "{DIFFICULTY}"

## GRAPH
Nodes: {NODE_LABELS}
Next linked nodes: {NEXT_NODES}

## RULES
1. Reply in markdown.
2. Use the persona names as prefixes if switching roles (e.g., "**ScopeGuard:** We are drifting...").
3. If the user masters the current node, suggest moving to the next linked node in the graph.
4. Be concise but helpful.
5. If style is Socratic, ask questions. If Direct, explain clearly. If Hybrid, mix both.
"""

STRUCTURED_REPLY_RULES = """
## OUTPUT
Return a JSON object with two fields:
- "author": the persona speaking ({PERSONAS}).
- "reply": the markdown reply, without a persona prefix.
"""

WELCOME_TEMPLATE = (
    "**⫻flow/adaptive_tutoring** initiated.\n\n"
    "**Lyra** has mapped the curriculum for **{OBJECTIVE}**. "
    "We are starting at **{START_LABEL}**.\n\n"
    "Current focus: **{START_LABEL}**.\n\n"
    "Choose next step:\n"
    "A) Explain concept (Direct Mode)\n"
    "B) Try it yourself (Interactive)\n"
    "C) Explore prerequisites"
)

# Shown in the setup form while the graph is generated
LOADING_MESSAGES = [
    "⫻cmd/exec:GPTASe → extracting raw TAS...",
    "⫻cmd/exec:puTASe → purifying logic (⫻data/ptas)...",
    "⫻cmd/exec:Lyra → structuring ⫻data/spec...",
    "⫻flow/ocs/swarm → initializing agent swarm...",
]

# ---------------------------------------------------------------------------
# JSON-Schema definitions
# ---------------------------------------------------------------------------

GRAPH_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "label": {"type": "string"},
                    "status": {"type": "string", "enum": ["pending", "active", "completed"]},
                },
                "required": ["id", "label", "status"],
                "additionalProperties": False,
            },
        },
        "links": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "source": {"type": "string"},
                    "target": {"type": "string"},
                },
                "required": ["source", "target"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["nodes", "links"],
    "additionalProperties": False,
}

# Local check of model output: extra keys such as "group" are tolerated
GRAPH_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "nodes": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "string"},
                    "label": {"type": "string"},
                    "status": {"type": "string", "enum": ["pending", "active", "completed"]},
                },
                "required": ["id", "label", "status"],
            },
        },
        "links": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "source": {"type": "string"},
                    "target": {"type": "string"},
                },
                "required": ["source", "target"],
            },
        },
    },
    "required": ["nodes", "links"],
}

REPLY_ENVELOPE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "author": {"type": "string", "enum": [DEFAULT_AUTHOR, *PERSONA_NAMES]},
        "reply": {"type": "string"},
    },
    "required": ["author", "reply"],
    "additionalProperties": False,
}

# ---------------------------------------------------------------------------
# Prompt-formatting helpers
# ---------------------------------------------------------------------------

def json_schema_format(name: str, schema: dict[str, Any]) -> dict[str, Any]:
    """Wrap a schema as a chat completions response_format payload."""
    return {
        "type": "json_schema",
        "json_schema": {"name": name, "schema": schema, "strict": True},
    }


def format_graph_prompt(objective: str) -> str:
    """Fill the graph architect prompt with the learner's objective."""
    return GRAPH_PROMPT_TEMPLATE.format(
        OBJECTIVE=objective,
        START_ID=START_NODE_ID,
        MIN_NODES=MIN_GRAPH_NODES,
        MAX_NODES=MAX_GRAPH_NODES,
    )


def format_orchestrator_prompt(
    objective: str,
    style: str,
    current_node: str,
    node_labels: list[str],
    next_nodes: list[str],
    difficulty: str,
    structured: bool = False,
) -> str:
    """Fill the orchestrator system instruction with runtime values."""
    prompt = ORCHESTRATOR_PROMPT_TEMPLATE.format(
        OBJECTIVE=objective,
        STYLE=style,
        CURRENT_NODE=current_node,
        DIFFICULTY=difficulty,
        NODE_LABELS=", ".join(node_labels),
        NEXT_NODES=", ".join(next_nodes) or "none",
    )
    if structured:
        prompt += STRUCTURED_REPLY_RULES.format(
            PERSONAS=", ".join([DEFAULT_AUTHOR, *PERSONA_NAMES])
        )
    return prompt


def format_welcome_message(objective: str, start_label: str) -> str:
    """Text of the seeded tutor message that opens every session."""
    return WELCOME_TEMPLATE.format(OBJECTIVE=objective, START_LABEL=start_label)
