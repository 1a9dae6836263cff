import pytest

from clinical_note_assistant.core.config import AssistantConfiguration, ConfigDefaults
from clinical_note_assistant.core.exceptions import ConfigurationError


class TestFromEnvironment:
    def test_defaults_without_environment(self, clean_env):
        config = AssistantConfiguration.from_environment()

        assert config.llm_provider == ConfigDefaults.DEFAULT_PROVIDER
        assert config.gemini_model == "gemini-2.5-flash"
        assert config.temperature == 0.7
        assert config.active_api_key is None

    def test_api_key_takes_precedence(self, clean_env):
        clean_env.setenv("GOOGLE_API_KEY", "google")
        clean_env.setenv("GEMINI_API_KEY", "gemini")
        config = AssistantConfiguration.from_environment()
        assert config.gemini_api_key == "gemini"

        clean_env.setenv("API_KEY", "primary")
        config = AssistantConfiguration.from_environment()
        assert config.gemini_api_key == "primary"

    def test_openai_only_key_selects_openai(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")

        config = AssistantConfiguration.from_environment()

        assert config.llm_provider == "openai"
        assert config.active_api_key == "sk-test"
        assert config.active_model == "gpt-4o-mini"

    def test_explicit_provider_is_respected(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        clean_env.setenv("LLM_PROVIDER", "Gemini")

        config = AssistantConfiguration.from_environment()

        assert config.llm_provider == "gemini"
        assert config.active_api_key is None

    def test_env_file_is_loaded(self, clean_env, tmp_path):
        env_file = tmp_path / "assistant.env"
        env_file.write_text("API_KEY=from-file\nLOG_LEVEL=debug\n")

        config = AssistantConfiguration.from_environment(env_file=str(env_file))

        assert config.gemini_api_key == "from-file"
        assert config.log_level == "DEBUG"

    def test_bad_temperature_value(self, clean_env):
        clean_env.setenv("LLM_TEMPERATURE", "warm")

        with pytest.raises(ConfigurationError):
            AssistantConfiguration.from_environment()

    def test_unsupported_provider_fails_validation(self, clean_env):
        clean_env.setenv("LLM_PROVIDER", "claude")

        with pytest.raises(ConfigurationError):
            AssistantConfiguration.from_environment()

        config = AssistantConfiguration.from_environment(validate_on_load=False)
        assert config.llm_provider == "claude"


class TestValidation:
    @pytest.mark.parametrize("temperature", [-0.1, 2.5])
    def test_temperature_out_of_range(self, temperature):
        with pytest.raises(ConfigurationError):
            AssistantConfiguration(temperature=temperature).validate()

    def test_require_api_key_names_the_variable(self):
        with pytest.raises(ConfigurationError) as exc_info:
            AssistantConfiguration().require_api_key()

        assert exc_info.value.message == (
            "API key is missing. Please set the API_KEY environment variable."
        )

    def test_require_api_key_returns_active_key(self):
        config = AssistantConfiguration(llm_provider="openai", gemini_api_key="g", openai_api_key="o")

        assert config.require_api_key() == "o"

    def test_to_dict_masks_keys(self):
        data = AssistantConfiguration(gemini_api_key="secret").to_dict()

        assert data["gemini_api_key"] == "***"
        assert data["openai_api_key"] is None
        assert "secret" not in str(data)
