"""
Configuration module for KickLang Tutor
Handles API key lookup, provider/model settings and tutoring constants
"""

import logging
import os
from typing import Optional, Dict
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Constants
APP_NAME = "KickLang Tutor"
APP_URL = "http://localhost:8501"  # Streamlit default, sent as OpenRouter referer

# Provider settings
DEFAULT_PROVIDER = "gemini"
SUPPORTED_PROVIDERS = ["gemini", "openai", "openrouter"]

# Model configurations per provider
PROVIDER_MODELS = {
    "gemini": {
        "chat": "gemini-3-flash-preview",
        "graph": "gemini-3-flash-preview",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai/",
        "api_key_env": "GEMINI_API_KEY",
    },
    "openai": {
        "chat": "gpt-4o-mini",
        "graph": "gpt-4o-mini",
        "base_url": None,  # Use default OpenAI base URL
        "api_key_env": "OPENAI_API_KEY",
    },
    "openrouter": {
        "chat": "google/gemini-2.5-flash",
        "graph": "google/gemini-2.5-flash",
        "base_url": "https://openrouter.ai/api/v1",
        "api_key_env": "OPENROUTER_API_KEY",
    },
}

# Provider-neutral fallback key
GENERIC_API_KEY_ENV = "API_KEY"

# Tutoring settings
CHAT_TEMPERATURE = 0.7
START_NODE_ID = "start"
START_NODE_LABEL = "Start"
MIN_GRAPH_NODES = 6
MAX_GRAPH_NODES = 10
DEFAULT_DIFFICULTY = "intermediate"


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_current_provider() -> str:
    """Get the configured provider, falling back to the default"""
    provider = os.environ.get("KICKLANG_PROVIDER", DEFAULT_PROVIDER).strip().lower()
    if provider not in SUPPORTED_PROVIDERS:
        logging.getLogger(__name__).warning(
            f"Unknown provider '{provider}' in KICKLANG_PROVIDER, using {DEFAULT_PROVIDER}"
        )
        return DEFAULT_PROVIDER
    return provider


def get_provider_config(provider: str = None) -> Dict:
    """Get model configuration for a specific provider"""
    if provider is None:
        provider = get_current_provider()

    if provider not in PROVIDER_MODELS:
        raise ValueError(f"No configuration found for provider: {provider}")

    return PROVIDER_MODELS[provider]


def load_api_key(provider: str = None) -> Optional[str]:
    """
    Load the API key for a provider from the environment.

    The provider-specific variable wins; the generic API_KEY variable is
    used when it is unset. Returns None when neither is present.
    """
    config = get_provider_config(provider)
    api_key = os.environ.get(config["api_key_env"]) or os.environ.get(GENERIC_API_KEY_ENV)
    return api_key or None


def structured_replies_enabled() -> bool:
    """Whether chat turns ask the model for an {author, reply} envelope"""
    return _env_flag("KICKLANG_STRUCTURED_REPLIES")


def get_log_level() -> int:
    """Logging level from KICKLANG_LOG_LEVEL (default INFO)"""
    name = os.environ.get("KICKLANG_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)
