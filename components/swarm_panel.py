"""
Swarm status panel
Agent roster grid and the session metrics block
"""

import streamlit as st

from backend.models import SWARM_AGENTS
from backend.session import TutorSession


def show_swarm_panel(session: TutorSession):
    st.markdown("##### 📈 Swarm Status")

    columns = st.columns(2)
    for i, agent in enumerate(SWARM_AGENTS):
        with columns[i % 2]:
            with st.container(border=True):
                st.markdown(
                    f"<span style='color:{agent.color};font-weight:700;font-size:0.8rem'>{agent.name}</span>",
                    unsafe_allow_html=True
                )
                st.caption(f"{agent.role} · `{agent.status}`")

    st.markdown("---")
    st.caption("⫻data/metrics")
    col1, col2 = st.columns([3, 1])
    with col1:
        st.caption("Ethics Compliance (Dima)")
        st.caption("Graph Traversal (Lyra)")
    with col2:
        st.caption(":green[Pass]")
        st.caption(f"{session.traversal_percent()}%")
