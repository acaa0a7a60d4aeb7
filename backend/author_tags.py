"""
Author detection for tutor replies.

Replies may open with a bold persona prefix such as ``**ScopeGuard:**``.
The first known marker found wins; anything else is attributed to the
primary tutor. This only drives the name shown above a chat bubble.
"""

from typing import Optional

DEFAULT_AUTHOR = "AI_Tutor"

# Checked in order, first hit wins
PERSONA_NAMES = [
    "Orchestrator",
    "ScopeGuard",
    "DebuggAI",
    "Dima",
    "WePlan",
    "Codein",
    "AR-00L",
    "Kick_La_Metta",
]

PERSONA_MARKERS = [(f"**{name}", name) for name in PERSONA_NAMES]


def classify_author(text: Optional[str]) -> str:
    """Return the persona name for a reply, defaulting to AI_Tutor."""
    if not text:
        return DEFAULT_AUTHOR
    for marker, name in PERSONA_MARKERS:
        if marker in text:
            return name
    return DEFAULT_AUTHOR


def resolve_author(text: Optional[str], declared: Optional[str] = None) -> str:
    """Prefer an author declared by a structured reply if it is a known persona."""
    if declared == DEFAULT_AUTHOR or declared in PERSONA_NAMES:
        return declared
    return classify_author(text)
