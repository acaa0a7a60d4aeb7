# Unit tests for provider configuration and client creation
import os
import unittest
from unittest.mock import Mock, patch

from utils.config import PROVIDER_MODELS, get_current_provider, load_api_key
from utils.providers import (
    ProviderError, create_client, extract_message_text, get_api_call_params,
    get_model_for_task, get_token_count
)

KEY_VARS = ["GEMINI_API_KEY", "OPENAI_API_KEY", "OPENROUTER_API_KEY", "API_KEY", "KICKLANG_PROVIDER"]


def clean_env():
    return {k: v for k, v in os.environ.items() if k not in KEY_VARS}


class TestConfig(unittest.TestCase):
    def test_default_provider(self):
        with patch.dict(os.environ, clean_env(), clear=True):
            self.assertEqual(get_current_provider(), "gemini")

    def test_unknown_provider_falls_back(self):
        with patch.dict(os.environ, {**clean_env(), "KICKLANG_PROVIDER": "nope"}, clear=True):
            self.assertEqual(get_current_provider(), "gemini")

    def test_provider_key_wins_over_generic(self):
        env = {**clean_env(), "OPENAI_API_KEY": "sk-specific", "API_KEY": "generic"}
        with patch.dict(os.environ, env, clear=True):
            self.assertEqual(load_api_key("openai"), "sk-specific")
            self.assertEqual(load_api_key("gemini"), "generic")

    def test_missing_key(self):
        with patch.dict(os.environ, clean_env(), clear=True):
            self.assertIsNone(load_api_key("gemini"))


class TestCreateClient(unittest.TestCase):
    def test_missing_key_is_rejected(self):
        with patch.dict(os.environ, clean_env(), clear=True):
            with self.assertRaises(ProviderError):
                create_client("gemini")

    def test_empty_key_is_rejected(self):
        with self.assertRaises(ProviderError):
            create_client("gemini", api_key="")

    def test_gemini_base_url(self):
        client = create_client("gemini", api_key="AI-test")
        self.assertIn("generativelanguage.googleapis.com", str(client.base_url))

    def test_explicit_key(self):
        client = create_client("openai", api_key="sk-test")
        self.assertEqual(client.api_key, "sk-test")

    def test_unsupported_provider(self):
        with self.assertRaises(ProviderError):
            create_client("mystery")


class TestModelsAndParams(unittest.TestCase):
    def test_model_for_task(self):
        self.assertEqual(get_model_for_task("chat", "openai"), PROVIDER_MODELS["openai"]["chat"])
        with self.assertRaises(ProviderError):
            get_model_for_task("base_url", "openai")

    def test_params_skip_none(self):
        params = get_api_call_params(model="m", messages=[], temperature=0.7)
        self.assertEqual(params, {"model": "m", "messages": [], "temperature": 0.7})

    def test_token_count(self):
        self.assertEqual(get_token_count(Mock(usage=Mock(total_tokens=7))), "7")
        self.assertEqual(get_token_count(Mock(usage={"total_tokens": 9})), "9")
        self.assertEqual(get_token_count(Mock(usage=None)), "n/a")


class TestExtractMessageText(unittest.TestCase):
    def test_missing_choices(self):
        with self.assertRaises(ValueError):
            extract_message_text(Mock(choices=None))

    def test_missing_message(self):
        with self.assertRaises(ValueError):
            extract_message_text(Mock(choices=[Mock(message=None)]))

    def test_content(self):
        response = Mock(choices=[Mock(message=Mock(content="hello"))])
        self.assertEqual(extract_message_text(response), "hello")


if __name__ == "__main__":
    unittest.main()
