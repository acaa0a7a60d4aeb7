"""
API Key overlay component
Lets the user paste a provider key for this browser session when none is set
"""

import streamlit as st
from typing import Optional

from utils.config import load_api_key, get_current_provider, get_provider_config
from utils.providers import validate_api_key, get_provider_info


def get_session_api_key() -> Optional[str]:
    """Key pasted in this browser session, else the one from the environment"""
    if "api_key" not in st.session_state:
        st.session_state.api_key = load_api_key(get_current_provider())
    return st.session_state.api_key


def check_and_show_api_notice() -> bool:
    """
    Returns True if an API key is available. Otherwise shows a notice with a
    button that opens the key dialog; the app keeps working but every model
    call will fail until a key is provided.
    """
    if get_session_api_key():
        return True

    provider = get_current_provider()
    env_var = get_provider_config(provider)["api_key_env"]
    st.warning(f"No API key found. Set `{env_var}` or add a key for this session.", icon="🔑")
    if st.button("🔑 Add API Key"):
        show_api_key_overlay()
    return False


@st.dialog("🔑 AI Provider Setup", width="large")
def show_api_key_overlay():
    """Modal dialog for pasting a key; it is kept in memory only"""
    provider = get_current_provider()
    provider_info = get_provider_info(provider)
    name = provider_info.get('name', provider.title())

    st.markdown(f"""
    ### Connect to {name}

    The key is held in this browser session only and is never written to disk.
    """)

    api_key = st.text_input(
        f"Enter your {name} API key:",
        type="password",
        placeholder=provider_info.get('api_key_prefix', '') + "...",
    )

    col1, col2 = st.columns(2)

    with col1:
        if st.button("💾 Use API Key", type="primary", use_container_width=True, disabled=not api_key):
            with st.spinner("Validating API key..."):
                if validate_api_key(api_key, provider):
                    st.session_state.api_key = api_key
                    st.success("✅ API key validated!")
                    st.rerun()
                else:
                    st.error(f"❌ Invalid API key for {name}")

    with col2:
        st.link_button(
            "🔗 Get API Key",
            provider_info.get('signup_url', '#'),
            use_container_width=True
        )
