"""
Session setup component
Collects the learning objective and builds the curriculum graph
"""

import threading
from typing import Any, Callable, Sequence

import streamlit as st

from backend.session import TutorSession
from backend.tutor_prompts import LOADING_MESSAGES

LOADING_LINE_INTERVAL = 1.2  # seconds each loading line stays up


def run_with_progress(
    func: Callable[..., Any],
    *args,
    on_step: Callable[[str], None],
    lines: Sequence[str] = LOADING_MESSAGES,
    interval: float = LOADING_LINE_INTERVAL,
) -> Any:
    """
    Run func(*args) in a worker thread, showing one loading line at a time.

    on_step gets the next line (cycling) every interval seconds until func
    finishes. func's return value is returned and its exception re-raised.
    """
    outcome = {}

    def worker():
        try:
            outcome["result"] = func(*args)
        except Exception as e:
            outcome["error"] = e

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()

    step = 0
    while thread.is_alive():
        if lines:
            on_step(lines[step % len(lines)])
        step += 1
        thread.join(interval)

    if "error" in outcome:
        raise outcome["error"]
    return outcome["result"]


def show_setup_form(session: TutorSession) -> bool:
    """
    Show the objective form. Returns True once a session has been started.
    """
    col1, col2, col3 = st.columns([1, 3, 1])
    with col2:
        st.markdown("# 🎯 KickLang Tutor")
        st.caption("FLUID MODE • SWARM V2.1")
        st.markdown(
            "Define your learning objective. The **Swarm** will execute parallel "
            "TAS extraction to build your personalized curriculum."
        )

        with st.form("setup_form"):
            objective = st.text_input(
                "What is your learning objective?",
                placeholder="e.g., Master Linear Algebra, Build a React App...",
                disabled=session.is_loading,
            )
            submitted = st.form_submit_button(
                "Initialize Swarm ›",
                type="primary",
                use_container_width=True,
                disabled=session.is_loading,
            )

        if not submitted:
            return False

        objective = objective.strip()
        if not objective:
            st.warning("Please enter a learning objective.")
            return False

        with st.status("Processing TAS...", expanded=True) as status:
            # Only the worker touches the session; status updates stay on this thread
            result = run_with_progress(
                session.start_session,
                objective,
                on_step=lambda line: status.update(label=line),
            )
            if result.ok:
                status.update(label="Parallel Execution Complete", state="complete")
            else:
                status.update(label="Curriculum fallback in use", state="error")

        return True
