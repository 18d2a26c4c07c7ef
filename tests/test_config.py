"""
Tests for environment-driven configuration.
"""

import pytest

from quizdesk.config import AppConfig
from quizdesk.constants.ai_constants import DEFAULT_OPENAI_MODEL
from quizdesk.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT


class TestAppConfigFromEnv:
    def test_defaults_without_variables(self):
        config = AppConfig.from_env({})

        assert config.host == DEFAULT_HOST
        assert config.port == DEFAULT_PORT
        assert config.openai_model == DEFAULT_OPENAI_MODEL
        assert config.has_openai_key is False

    def test_values_are_read(self):
        config = AppConfig.from_env(
            {
                "QUIZDESK_HOST": "127.0.0.1",
                "QUIZDESK_PORT": "9000",
                "OPENAI_API_KEY": " sk-test ",
                "QUIZDESK_OPENAI_MODEL": "gpt-4o-mini",
                "QUIZDESK_OPENAI_TIMEOUT": "12.5",
            }
        )

        assert (config.host, config.port) == ("127.0.0.1", 9000)
        assert config.openai_api_key == "sk-test"
        assert config.has_openai_key is True
        assert config.openai_model == "gpt-4o-mini"
        assert config.openai_timeout_seconds == 12.5

    def test_blank_key_means_no_model(self):
        assert AppConfig.from_env({"OPENAI_API_KEY": "   "}).has_openai_key is False

    def test_invalid_port(self):
        with pytest.raises(ValueError, match="QUIZDESK_PORT"):
            AppConfig.from_env({"QUIZDESK_PORT": "eighty"})
