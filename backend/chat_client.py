"""
Chat client for KickLang Tutor
Sends one tutoring turn to the model with the orchestrator system instruction
"""

import json
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from openai import OpenAI

from backend.author_tags import resolve_author
from backend.errors import ChatFailure
from backend.models import ChatTurn, LearningGraph, LearningStyle
from backend.tutor_prompts import (
    REPLY_ENVELOPE_SCHEMA, format_orchestrator_prompt, json_schema_format
)
from utils.config import CHAT_TEMPERATURE, DEFAULT_DIFFICULTY, structured_replies_enabled
from utils.providers import (
    create_client, extract_message_text, get_api_call_params,
    get_model_for_task, get_token_count
)

logger = logging.getLogger(__name__)

APOLOGY_MESSAGE = "I apologize, I'm having trouble connecting to the neural core. Please try again."


@dataclass
class ChatContext:
    """What the tutor needs to know about the session for one turn"""
    objective: str
    style: LearningStyle
    current_node_label: str
    graph: LearningGraph
    current_node_id: Optional[str] = None
    difficulty: str = DEFAULT_DIFFICULTY


@dataclass
class TurnResult:
    """Reply text plus the author (when declared) and the caught error"""
    text: str
    author: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def build_system_instruction(context: ChatContext, structured: bool = False) -> str:
    """Orchestrator instruction embedding objective, style and the graph."""
    next_nodes = []
    if context.current_node_id:
        next_nodes = [node.label for node in context.graph.successors(context.current_node_id)]
    style = context.style.value if isinstance(context.style, LearningStyle) else str(context.style)
    return format_orchestrator_prompt(
        objective=context.objective,
        style=style,
        current_node=context.current_node_label,
        node_labels=context.graph.labels(),
        next_nodes=next_nodes,
        difficulty=context.difficulty,
        structured=structured,
    )


def format_history(history: Sequence[ChatTurn]) -> List[Dict[str, str]]:
    """Map transcript turns to chat completion messages"""
    return [
        {"role": "assistant" if turn.role == "model" else "user", "content": turn.text}
        for turn in history
    ]


def parse_reply_envelope(raw_text: str) -> TurnResult:
    """
    Read an {author, reply} envelope. Text that is not a valid envelope is
    kept as the reply with no declared author.
    """
    try:
        data = json.loads(raw_text)
    except json.JSONDecodeError:
        logger.warning("Structured reply was not JSON, using raw text")
        return TurnResult(text=raw_text)

    if not isinstance(data, dict) or not isinstance(data.get("reply"), str) or not data["reply"]:
        logger.warning("Structured reply is missing 'reply', using raw text")
        return TurnResult(text=raw_text)

    author = data.get("author")
    return TurnResult(text=data["reply"], author=resolve_author(data["reply"], author))


def request_turn(
    history: Sequence[ChatTurn],
    new_message: str,
    context: ChatContext,
    client: Optional[OpenAI] = None,
    structured: Optional[bool] = None,
) -> TurnResult:
    """
    Exchange one chat turn with the model.

    Never raises: on any failure the apology text is returned together with
    the caught error.
    """
    if structured is None:
        structured = structured_replies_enabled()

    try:
        if client is None:
            client = create_client()
        model = get_model_for_task("chat")
        messages = [{"role": "system", "content": build_system_instruction(context, structured)}]
        messages.extend(format_history(history))
        messages.append({"role": "user", "content": new_message})

        params = get_api_call_params(
            model=model,
            messages=messages,
            temperature=CHAT_TEMPERATURE,
            response_format=json_schema_format("tutor_reply", REPLY_ENVELOPE_SCHEMA) if structured else None,
        )
        logger.info(f"[API CALL] Reason: Tutor turn | Model: {model} | History: {len(history)} turns")
        response = client.chat.completions.create(**params)
        logger.info(f"[API RETURN] Tutor turn complete | Model: {model} | Tokens: {get_token_count(response)}")

        try:
            raw_text = extract_message_text(response)
        except ValueError as e:
            raise ChatFailure(str(e)) from e

        if structured:
            return parse_reply_envelope(raw_text)
        return TurnResult(text=raw_text)

    except Exception as e:
        error = e if isinstance(e, ChatFailure) else ChatFailure(f"{type(e).__name__}: {e}")
        if error is not e:
            error.__cause__ = e
        logger.error(f"Chat error: {error}")
        return TurnResult(text=APOLOGY_MESSAGE, error=error)


def send_turn(
    history: Sequence[ChatTurn],
    new_message: str,
    context: ChatContext,
    client: Optional[OpenAI] = None,
) -> str:
    """Raw reply text for one turn, or the apology text on failure."""
    return request_turn(history, new_message, context, client).text
