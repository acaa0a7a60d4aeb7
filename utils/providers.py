"""
Provider abstraction for different AI providers
Supports Gemini (OpenAI-compatible endpoint), OpenAI and OpenRouter
"""

from openai import OpenAI
from typing import Dict, Optional
from utils.config import (
    load_api_key, get_current_provider, get_provider_config,
    SUPPORTED_PROVIDERS, APP_NAME, APP_URL
)


class ProviderError(Exception):
    """Base exception for provider-related errors"""
    pass


def create_client(provider: str = None, api_key: Optional[str] = None, **kwargs) -> OpenAI:
    """
    Create an API client for the specified provider.
    Every supported provider speaks the OpenAI chat completions API, so the
    same client class is used for all of them.

    Callers that build the client lazily, inside the model call, turn a
    missing key into a failure at invocation time rather than at startup.

    Args:
        provider: Provider name. If None, uses current provider.
        api_key: Explicit key (e.g. pasted in the UI). If None, read from the environment.
        **kwargs: Additional parameters passed to the OpenAI client constructor

    Returns:
        OpenAI client configured for the specified provider

    Raises:
        ProviderError: If provider is not supported or API key is missing
    """
    if provider is None:
        provider = get_current_provider()

    if provider not in SUPPORTED_PROVIDERS:
        raise ProviderError(f"Unsupported provider: {provider}. Supported: {SUPPORTED_PROVIDERS}")

    if api_key is None:
        api_key = load_api_key(provider)

    if not api_key:
        raise ProviderError(f"No API key found for provider: {provider}")

    config = get_provider_config(provider)

    client_kwargs = {"api_key": api_key}
    if config.get("base_url"):
        client_kwargs["base_url"] = config["base_url"]

    # Add app attribution headers for OpenRouter
    if provider == "openrouter":
        client_kwargs["default_headers"] = {
            "HTTP-Referer": APP_URL,
            "X-Title": APP_NAME,
        }

    client_kwargs.update(kwargs)

    return OpenAI(**client_kwargs)


def get_model_for_task(task: str, provider: str = None) -> str:
    """
    Get the appropriate model for a specific task.

    Args:
        task: Task type ("chat" or "graph")
        provider: Provider name. If None, uses current provider.

    Raises:
        ProviderError: If task is not supported for the provider
    """
    if provider is None:
        provider = get_current_provider()

    config = get_provider_config(provider)

    if task not in ("chat", "graph") or task not in config:
        raise ProviderError(f"Task '{task}' not supported for provider '{provider}'")

    return config[task]


def validate_api_key(api_key: str, provider: str) -> bool:
    """
    Validate an API key for a specific provider by listing models.

    Returns:
        True if API key is valid, False otherwise
    """
    try:
        test_client = create_client(provider, api_key=api_key)
        test_client.models.list()
        return True
    except Exception:
        return False


def get_provider_info(provider: str) -> Dict:
    """
    Get display information about a specific provider.
    """
    provider_info = {
        "gemini": {
            "name": "Google Gemini",
            "description": "Gemini models through Google's OpenAI-compatible endpoint",
            "api_key_prefix": "AI",
            "signup_url": "https://aistudio.google.com/apikey",
        },
        "openai": {
            "name": "OpenAI",
            "description": "Official OpenAI API with access to GPT models",
            "api_key_prefix": "sk-",
            "signup_url": "https://platform.openai.com/api-keys",
        },
        "openrouter": {
            "name": "OpenRouter",
            "description": "Access to multiple AI models including Gemini, Claude and more",
            "api_key_prefix": "sk-or-",
            "signup_url": "https://openrouter.ai/keys",
        },
    }

    return provider_info.get(provider, {})


def get_api_call_params(
    model: str,
    messages: list,
    temperature: Optional[float] = None,
    max_tokens: Optional[int] = None,
    response_format: Optional[Dict] = None,
    **kwargs
) -> Dict:
    """
    Build chat completion parameters, leaving out unset options.
    """
    params = {
        "model": model,
        "messages": messages
    }

    optional_params = {
        "temperature": temperature,
        "max_tokens": max_tokens,
        "response_format": response_format,
    }

    # Only include parameters that have values
    for key, value in optional_params.items():
        if value is not None:
            params[key] = value

    params.update(kwargs)

    return params


def get_token_count(response) -> str:
    """
    Extract token count from API response, handling both object and dict formats.
    """
    usage_info = getattr(response, 'usage', None)
    if usage_info:
        if hasattr(usage_info, 'total_tokens'):
            return str(usage_info.total_tokens)
        elif isinstance(usage_info, dict):
            return str(usage_info.get('total_tokens', 'n/a'))
    return 'n/a'


def extract_message_text(response) -> str:
    """
    Pull the reply text out of a chat completion response.

    Raises:
        ValueError: If the response has no choices, message or content
    """
    if not response or not hasattr(response, 'choices') or not response.choices:
        raise ValueError("Invalid response structure: missing or empty choices")

    if not response.choices[0] or not hasattr(response.choices[0], 'message') or not response.choices[0].message:
        raise ValueError("Invalid response structure: missing or empty message")

    content = response.choices[0].message.content
    if not content:
        raise ValueError("Invalid response structure: empty content")

    return content
