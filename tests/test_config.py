import pytest

from pricer_setter import config as config_module
from pricer_setter.config import Settings
from pricer_setter.errors import ProviderNotConfiguredError
from pricer_setter.llm import build_llm_adapter
from pricer_setter.openai_adapter import OpenAICompatibleAdapter


def test_defaults_without_environment():
    settings = Settings.from_env({})
    assert settings.environment == "dev"
    assert settings.llm_provider == "openai"
    assert settings.auth_mode == "password"
    assert settings.llm_api_key is None
    assert settings.token_ttl_minutes == 720
    assert settings.token_secret is None


def test_values_are_read_from_environment():
    settings = Settings.from_env(
        {
            "ENVIRONMENT": "prod",
            "DATABASE_URL": "postgresql://u:p@db/pricer",
            "LLM_PROVIDER": "zai",
            "LLM_API_KEY": "key",
            "AUTH_MODE": "access_code",
            "ACCESS_CODE": "code",
            "TOKEN_TTL_MINUTES": "60",
            "CORS_ORIGINS": "https://a.example, https://b.example",
        }
    )
    assert settings.database_url == "postgresql://u:p@db/pricer"
    assert settings.llm_api_key.get_secret_value() == "key"
    assert settings.access_code.get_secret_value() == "code"
    assert settings.token_ttl_minutes == 60
    assert list(settings.cors_origins) == ["https://a.example", "https://b.example"]


def test_missing_secrets_fall_back_to_secret_manager(monkeypatch):
    fetched = []

    def fake_get_secret(project_id, secret_id):
        fetched.append((project_id, secret_id))
        return "from-secret-manager" if secret_id == "llm-api-key" else None

    monkeypatch.setattr(config_module, "get_secret", fake_get_secret)
    settings = Settings.from_env({"PROJECT_ID": "proj", "TOKEN_SECRET": "explicit"})

    assert settings.llm_api_key.get_secret_value() == "from-secret-manager"
    assert settings.token_secret.get_secret_value() == "explicit"
    assert ("proj", "token-secret") not in fetched


def test_openai_provider_requires_key():
    with pytest.raises(ProviderNotConfiguredError):
        build_llm_adapter(Settings())


def test_zai_provider_uses_compatible_endpoint_without_json_mode():
    adapter = build_llm_adapter(Settings(llm_provider="zai", llm_api_key="key"))
    assert isinstance(adapter, OpenAICompatibleAdapter)
    assert adapter.model_name == "zeus-70b-preview"
    assert adapter.json_mode is False
