"""
Graph visualization component for KickLang Tutor
Creates a force-directed Graphviz diagram of the concept graph
"""

import graphviz
from typing import Dict

from backend.models import ConceptNode, LearningGraph

CURRENT_FILL = "#3b82f6"
CURRENT_STROKE = "#60a5fa"
COMPLETED_FILL = "#10b981"
DEFAULT_FILL = "#1e293b"
DEFAULT_STROKE = "#94a3b8"
EDGE_COLOR = "#475569"


def node_style(node: ConceptNode, current_node_id: str) -> Dict[str, str]:
    """
    Fill, outline and outline width for a node.
    The current node is highlighted whatever its status.
    """
    if node.id == current_node_id:
        return {"fillcolor": CURRENT_FILL, "color": CURRENT_STROKE, "penwidth": "3"}
    if node.status == "completed":
        return {"fillcolor": COMPLETED_FILL, "color": DEFAULT_STROKE, "penwidth": "2"}
    return {"fillcolor": DEFAULT_FILL, "color": DEFAULT_STROKE, "penwidth": "2"}


def create_knowledge_graph(graph: LearningGraph, current_node_id: str) -> graphviz.Digraph:
    """
    Create a Graphviz diagram for the concept graph

    Args:
        graph: Parsed learning graph
        current_node_id: Node to highlight

    Returns:
        Graphviz Digraph object
    """
    # fdp is graphviz's force-directed spring layout
    dot = graphviz.Digraph(
        comment='Lyra Knowledge Graph',
        engine='fdp'
    )

    dot.attr('graph',
             fontname='Inter',
             fontsize='12',
             bgcolor='transparent',
             overlap='false',
             splines='true',
             K='1.2'
    )

    dot.attr('node',
             shape='circle',
             style='filled',
             fixedsize='false',
             fontname='Inter',
             fontsize='10',
             fontcolor='#f1f5f9'
    )

    dot.attr('edge',
             color=EDGE_COLOR,
             penwidth='2',
             arrowsize='0.7'
    )

    known = set()
    for node in graph.nodes:
        known.add(node.id)
        dot.node(node.id, node.label, tooltip=f"{node.label} ({node.status})",
                 **node_style(node, current_node_id))

    for link in graph.links:
        # Graphviz would invent a node for an unknown endpoint
        if link.source in known and link.target in known:
            dot.edge(link.source, link.target)

    return dot
