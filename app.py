"""
KickLang Tutor - Adaptive tutoring with a concept graph
Main entry point: chat on the left, knowledge graph and swarm on the right
"""

import logging

import streamlit as st

from backend.errors import SessionBusyError
from backend.models import LearningStyle
from backend.session import TutorSession
from backend.transcript import format_transcript_markdown, transcript_filename
from components.api_key_overlay import check_and_show_api_notice, get_session_api_key
from components.chat_view import render_message, render_messages
from components.graph_viz import create_knowledge_graph
from components.setup_form import show_setup_form
from components.swarm_panel import show_swarm_panel
from utils.config import get_current_provider, get_log_level, get_provider_config
from utils.providers import create_client, get_provider_info

logging.basicConfig(level=get_log_level())
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="KickLang Tutor",
    page_icon="🧠",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def get_tutor_session() -> TutorSession:
    """The TutorSession owned by this browser session, bound to the current key"""
    api_key = get_session_api_key()
    if "tutor_session" not in st.session_state:
        st.session_state.tutor_session = TutorSession()
        st.session_state.client_key = None
    session = st.session_state.tutor_session
    if st.session_state.client_key != api_key:
        # Without a key the adapters build their own client per call and fall back
        session.client = create_client(api_key=api_key) if api_key else None
        st.session_state.client_key = api_key
    return session


def on_node_selected(session: TutorSession):
    session.select_node(st.session_state.node_select)


def on_style_selected(session: TutorSession):
    session.set_style(LearningStyle(st.session_state.style_select))


def show_sidebar(session: TutorSession):
    with st.sidebar:
        provider = get_current_provider()
        st.markdown("### ⚙️ Session")
        st.caption(f"Provider: {get_provider_info(provider).get('name', provider)}")
        st.caption(f"Model: `{get_provider_config(provider)['chat']}`")

        if session.has_started:
            styles = [style.value for style in LearningStyle]
            st.selectbox(
                "Learning style",
                options=styles,
                index=styles.index(session.state.learning_style.value),
                key="style_select",
                on_change=on_style_selected,
                args=(session,),
                disabled=session.busy,
            )
            st.download_button(
                "📄 Download Transcript",
                data=format_transcript_markdown(session),
                file_name=transcript_filename(session),
                mime="text/markdown",
                use_container_width=True,
            )
            if st.button("🆕 New Session", use_container_width=True):
                session.reset()
                for key in ("node_select", "style_select"):
                    st.session_state.pop(key, None)
                st.rerun()


def show_header(session: TutorSession):
    col1, col2 = st.columns([4, 1])
    with col1:
        st.markdown(f"#### 🧠 {session.state.objective}")
        indicator = "🟣 Processing..." if session.is_typing else "🟢 Fluid Mode Active"
        st.caption(indicator)
    with col2:
        if st.button(f"⫻mode:{session.state.learning_style.value}", disabled=session.busy):
            session.toggle_style()
            st.session_state.pop("style_select", None)
            st.rerun()


def show_chat(session: TutorSession):
    messages_box = st.container(height=560)
    with messages_box:
        render_messages(session.messages)

    prompt = st.chat_input("Type your answer or question...", disabled=session.busy)
    if prompt and prompt.strip():
        with messages_box:
            try:
                with st.spinner("🤔 Thinking..."):
                    session.send_message(prompt, on_submitted=render_message)
            except SessionBusyError as e:
                st.warning(str(e))
                return
        st.rerun()

    provider_name = get_provider_info(get_current_provider()).get("name", "AI")
    st.caption(f"⫻mode: Fluid | ⫻lang: en | powered by {provider_name}")


def show_graph(session: TutorSession):
    with st.container(border=True):
        st.markdown("**:blue[Lyra]** Knowledge Graph")
        if session.graph.nodes:
            graph_viz = create_knowledge_graph(session.graph, session.state.current_node_id)
            st.graphviz_chart(graph_viz.source, use_container_width=True)

            node_ids = session.graph.node_ids()
            current = session.state.current_node_id
            st.selectbox(
                "Focus node",
                options=node_ids,
                index=node_ids.index(current) if current in node_ids else None,
                format_func=lambda node_id: session.graph.label_for(node_id, default=node_id),
                key="node_select",
                on_change=on_node_selected,
                args=(session,),
            )
        else:
            st.info("No concepts mapped yet.")


session = get_tutor_session()
show_sidebar(session)

if not session.has_started:
    check_and_show_api_notice()
    if show_setup_form(session):
        st.rerun()
    st.stop()

if session.last_error is not None:
    st.warning(f"⚠️ Degraded response: {session.last_error}")

left, right = st.columns([3, 2])

with left:
    show_header(session)
    show_chat(session)

with right:
    show_graph(session)
    show_swarm_panel(session)
