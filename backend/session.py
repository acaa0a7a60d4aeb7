# backend/session.py
"""
Session state holder for KickLang Tutor
One TutorSession per browser session, kept in st.session_state and
passed explicitly to every UI handler
"""

import logging
from typing import Callable, List, Optional

from openai import OpenAI

from backend.author_tags import DEFAULT_AUTHOR, resolve_author
from backend.chat_client import ChatContext, TurnResult, request_turn
from backend.errors import SessionBusyError
from backend.graph_client import GraphResult, request_graph
from backend.models import (
    ChatTurn, LearningGraph, LearningStyle, Message, SessionState
)
from backend.tutor_prompts import format_welcome_message

logger = logging.getLogger(__name__)

WELCOME_MESSAGE_ID = "init-1"

GraphRequester = Callable[..., GraphResult]
TurnRequester = Callable[..., TurnResult]


class TutorSession:
    """Objective, graph, current node and message log of one tutoring session"""

    def __init__(
        self,
        client: Optional[OpenAI] = None,
        graph_requester: GraphRequester = request_graph,
        turn_requester: TurnRequester = request_turn,
    ):
        self.client = client
        self._request_graph = graph_requester
        self._request_turn = turn_requester
        self.reset()

    def reset(self):
        """Forget everything and return to the setup screen"""
        self.state = SessionState()
        self.graph = LearningGraph()
        self.messages: List[Message] = []
        self.history: List[ChatTurn] = []
        self.has_started = False
        self.is_loading = False
        self.is_typing = False
        self.last_error: Optional[Exception] = None

    @property
    def busy(self) -> bool:
        return self.is_loading or self.is_typing

    def _check_idle(self):
        if self.busy:
            raise SessionBusyError("A model call is already in progress for this session")

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def start_session(self, objective: str) -> GraphResult:
        """Build the graph for an objective and seed the welcome message."""
        self._check_idle()
        self.is_loading = True
        try:
            result = self._request_graph(objective, client=self.client)
            self.graph = result.graph
            self.last_error = result.error

            self.state.objective = objective
            self.state.current_node_id = self.graph.first_node_id()

            welcome = Message(
                id=WELCOME_MESSAGE_ID,
                role="model",
                author_name=DEFAULT_AUTHOR,
                text=format_welcome_message(objective, self.graph.first_node_label()),
            )
            self.messages = [welcome]
            self.history = [ChatTurn(role="model", text=welcome.text)]
            self.has_started = True
            logger.info(f"Session started for '{objective}' at node '{self.state.current_node_id}'")
            return result
        finally:
            self.is_loading = False

    def submit_user_message(self, text: str) -> Message:
        """Append the user's message to the log before the model replies."""
        self._check_idle()
        message = Message(role="user", text=text)
        self.messages.append(message)
        self.is_typing = True
        return message

    def complete_turn(self, text: str) -> Message:
        """Ask the model for a reply to text and append it, tagged with its author."""
        try:
            result = self._request_turn(
                list(self.history),
                text,
                self.context(),
                client=self.client,
            )
            self.last_error = result.error

            message = Message(
                role="model",
                author_name=resolve_author(result.text, result.author),
                text=result.text,
            )
            self.messages.append(message)
            self.history.append(ChatTurn(role="user", text=text))
            self.history.append(ChatTurn(role="model", text=result.text))
            return message
        finally:
            self.is_typing = False

    def send_message(
        self, text: str, on_submitted: Optional[Callable[[Message], None]] = None
    ) -> Message:
        """
        Optimistically log the user message, then fetch and log the reply.

        on_submitted is called with the user message before the model call,
        e.g. to draw it. The session is idle again when this returns or raises,
        even if the caller is interrupted between the two steps.
        """
        message = self.submit_user_message(text)
        try:
            if on_submitted is not None:
                on_submitted(message)
            return self.complete_turn(text)
        finally:
            self.is_typing = False

    def select_node(self, node_id: str):
        """Point the session at node_id; the id is not checked against the graph."""
        self.state.current_node_id = node_id
        logger.info(f"⫻cmd/exec:Lyra → switching context to node ID: {node_id}")

    def toggle_style(self) -> LearningStyle:
        """Flip between Socratic and Direct. Hybrid flips to Socratic."""
        if self.state.learning_style == LearningStyle.SOCRATIC:
            self.state.learning_style = LearningStyle.DIRECT
        else:
            self.state.learning_style = LearningStyle.SOCRATIC
        return self.state.learning_style

    def set_style(self, style: LearningStyle) -> LearningStyle:
        self.state.learning_style = LearningStyle(style)
        return self.state.learning_style

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    def current_node_label(self) -> str:
        return self.graph.label_for(self.state.current_node_id, default="Unknown")

    def context(self) -> ChatContext:
        return ChatContext(
            objective=self.state.objective,
            style=self.state.learning_style,
            current_node_label=self.current_node_label(),
            graph=self.graph,
            current_node_id=self.state.current_node_id,
            difficulty=self.state.difficulty,
        )

    def traversal_percent(self) -> int:
        """Share of the graph represented by one node, as a whole percentage"""
        if not self.graph.nodes:
            return 0
        return int(100 / len(self.graph.nodes) + 0.5)
