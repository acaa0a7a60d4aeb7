# Unit tests for the knowledge graph diagram
import unittest

from backend.models import ConceptLink, ConceptNode, LearningGraph
from components.graph_viz import (
    COMPLETED_FILL, CURRENT_FILL, DEFAULT_FILL, create_knowledge_graph, node_style
)


class TestNodeStyle(unittest.TestCase):
    def test_current_node_wins_over_status(self):
        node = ConceptNode(id="a", label="A", status="completed")
        self.assertEqual(node_style(node, "a")["fillcolor"], CURRENT_FILL)

    def test_completed_and_pending(self):
        done = ConceptNode(id="a", label="A", status="completed")
        todo = ConceptNode(id="b", label="B", status="pending")
        self.assertEqual(node_style(done, "x")["fillcolor"], COMPLETED_FILL)
        self.assertEqual(node_style(todo, "x")["fillcolor"], DEFAULT_FILL)


class TestCreateKnowledgeGraph(unittest.TestCase):
    def test_nodes_and_edges(self):
        graph = LearningGraph(
            nodes=[
                ConceptNode(id="start", label="Start", status="active"),
                ConceptNode(id="n2", label="Base Case"),
            ],
            links=[
                ConceptLink(source="start", target="n2"),
                ConceptLink(source="n2", target="ghost"),
            ],
        )
        dot = create_knowledge_graph(graph, "start")
        source = dot.source
        self.assertEqual(dot.engine, "fdp")
        self.assertIn("start -> n2", source)
        self.assertIn('"Base Case"', source)
        self.assertNotIn("ghost", source)
        self.assertIn(CURRENT_FILL, source)


if __name__ == "__main__":
    unittest.main()
