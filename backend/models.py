"""
Data models for KickLang Tutor
Concept graph, chat messages, session state and the agent roster
"""

import time
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from utils.config import START_NODE_ID, START_NODE_LABEL, DEFAULT_DIFFICULTY


NodeStatus = Literal["pending", "active", "completed"]
MessageRole = Literal["user", "model", "system"]


class LearningStyle(str, Enum):
    """Mode hint passed to the tutor prompt"""
    SOCRATIC = "Socratic"
    DIRECT = "Direct"
    HYBRID = "Hybrid"


class ConceptNode(BaseModel):
    """One unit of material in the curriculum graph"""
    id: str
    label: str
    status: NodeStatus = "pending"


class ConceptLink(BaseModel):
    """Directed prerequisite edge between two node ids"""
    source: str
    target: str


class LearningGraph(BaseModel):
    """Ordered nodes and links for one session"""
    nodes: List[ConceptNode] = Field(default_factory=list)
    links: List[ConceptLink] = Field(default_factory=list)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.nodes]

    def labels(self) -> List[str]:
        return [node.label for node in self.nodes]

    def find_node(self, node_id: str) -> Optional[ConceptNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def label_for(self, node_id: str, default: str = "Unknown") -> str:
        node = self.find_node(node_id)
        return node.label if node else default

    def successors(self, node_id: str) -> List[ConceptNode]:
        """Nodes reachable by one link from node_id, in link order"""
        targets = [link.target for link in self.links if link.source == node_id]
        return [node for target in targets for node in self.nodes if node.id == target]

    def first_node_id(self) -> str:
        return self.nodes[0].id if self.nodes else START_NODE_ID

    def first_node_label(self) -> str:
        return self.nodes[0].label if self.nodes else START_NODE_LABEL


def fallback_graph() -> LearningGraph:
    """Single active start node, used whenever generation fails"""
    return LearningGraph(
        nodes=[ConceptNode(id=START_NODE_ID, label=START_NODE_LABEL, status="active")],
        links=[],
    )


def now_ms() -> int:
    return int(time.time() * 1000)


class Message(BaseModel):
    """A chat transcript entry"""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    role: MessageRole
    author_name: Optional[str] = None
    text: str
    timestamp: int = Field(default_factory=now_ms)


class ChatTurn(BaseModel):
    """One entry of the history sent to the model"""
    role: Literal["user", "model"]
    text: str


class SessionState(BaseModel):
    """Tutoring parameters for the current session"""
    objective: str = ""
    learning_style: LearningStyle = LearningStyle.SOCRATIC
    current_node_id: str = START_NODE_ID
    difficulty: str = DEFAULT_DIFFICULTY


@dataclass
class Persona:
    """Represents an agent of the tutoring swarm"""
    name: str
    role: str
    status: str
    color: str


SWARM_AGENTS: List[Persona] = [
    Persona("AI_Tutor", "Instructor", "Active", "#818cf8"),
    Persona("WePlan", "Strategist", "Planning", "#60a5fa"),
    Persona("Codein", "Implementation", "Standby", "#fbbf24"),
    Persona("ScopeGuard", "Focus", "Monitoring", "#34d399"),
    Persona("Lyra", "Architect", "Graphing", "#c084fc"),
    Persona("Dima", "Ethics", "Oversight", "#f87171"),
    Persona("AR-00L", "Visuals", "Standby", "#f472b6"),
    Persona("Kick_La_Metta", "Formalizer", "Standby", "#94a3b8"),
]
