"""
Chat transcript component
Renders the message log with author labels and times
"""

import streamlit as st
from typing import List

from backend.models import Message
from backend.transcript import format_timestamp


def render_message(message: Message):
    """Show one message as a chat bubble"""
    role = "user" if message.role == "user" else "assistant"
    with st.chat_message(role):
        if message.author_name and message.role != "user":
            st.caption(f"**{message.author_name}**")
        st.markdown(message.text)
        st.caption(format_timestamp(message.timestamp))


def render_messages(messages: List[Message]):
    for message in messages:
        render_message(message)
