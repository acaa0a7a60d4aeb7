"""
Transcript export for KickLang Tutor
Renders the current session as a markdown document for download
"""

from datetime import datetime
from typing import List

from backend.models import Message
from backend.session import TutorSession


def format_timestamp(timestamp_ms: int) -> str:
    """HH:MM local time for an epoch-milliseconds timestamp"""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M")


def format_message(message: Message) -> str:
    """Markdown block for one transcript entry"""
    if message.role == "user":
        emoji, name = "👤", "You"
    elif message.role == "system":
        emoji, name = "⚡", "System"
    else:
        emoji, name = "🤖", message.author_name or "AI_Tutor"
    return f"### {emoji} {name} ({format_timestamp(message.timestamp)})\n\n{message.text}\n\n"


def format_graph_outline(session: TutorSession) -> List[str]:
    lines = []
    for node in session.graph.nodes:
        marker = "▶" if node.id == session.state.current_node_id else "-"
        lines.append(f"{marker} **{node.label}** (`{node.id}`, {node.status})")
    return lines


def format_transcript_markdown(session: TutorSession) -> str:
    """Session metadata, the concept graph and every message in log order"""
    state = session.state
    parts = [
        f"# Learning Session: {state.objective}\n\n",
        f"**Learning Style:** {state.learning_style.value}\n",
        f"**Difficulty:** {state.difficulty}\n",
        f"**Current Node:** {session.current_node_label()}\n",
        f"**Exported:** {datetime.now().isoformat(timespec='seconds')}\n\n",
        "## 🗺️ Concept Graph\n\n",
    ]
    outline = format_graph_outline(session)
    parts.append("\n".join(outline) + "\n\n" if outline else "No concepts yet\n\n")

    parts.append("---\n\n## 💬 Session Transcript\n\n")
    for message in session.messages:
        parts.append(format_message(message))

    return "".join(parts)


def transcript_filename(session: TutorSession) -> str:
    slug = "".join(c if c.isalnum() else "-" for c in session.state.objective.lower()).strip("-")
    while "--" in slug:
        slug = slug.replace("--", "-")
    return f"kicklang-{slug or 'session'}.md"
