import pytest

from gcloud_lite.core import config

ENV_VARS = (
    "PUBSUB_PROJECT",
    "PUBSUB_EMULATOR_HOST",
    "PUBSUB_TIMEOUT",
) + config.CREDENTIAL_ENV_VARS


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)


def setup_function(function):
    config.get_pubsub_settings.cache_clear()


def teardown_function(function):
    config.get_pubsub_settings.cache_clear()


def test_get_pubsub_settings_reads_env(monkeypatch):
    monkeypatch.setenv("PUBSUB_PROJECT", "my-project")
    monkeypatch.setenv("PUBSUB_EMULATOR_HOST", "localhost:8085")
    monkeypatch.setenv("PUBSUB_TIMEOUT", "30")
    monkeypatch.setenv("PUBSUB_KEYFILE", "/secrets/keyfile.json")

    settings = config.get_pubsub_settings()

    assert settings.project_id == "my-project"
    assert settings.emulator_host == "localhost:8085"
    assert settings.timeout == 30
    assert settings.credentials == "/secrets/keyfile.json"
    assert settings.scope is None
    assert settings.client_config is None


def test_get_pubsub_settings_is_cached(monkeypatch):
    monkeypatch.setenv("PUBSUB_PROJECT", "first")
    first = config.get_pubsub_settings()
    monkeypatch.setenv("PUBSUB_PROJECT", "second")
    assert config.get_pubsub_settings() is first


def test_get_pubsub_settings_warns_when_project_missing(caplog):
    with caplog.at_level("WARNING"):
        settings = config.get_pubsub_settings()

    assert "PUBSUB_PROJECT is not set" in " ".join(caplog.messages)
    assert settings == config.PubsubSettings()


def test_credentials_env_precedence(monkeypatch):
    monkeypatch.setenv("PUBSUB_KEYFILE", "/keyfile.json")
    monkeypatch.setenv("PUBSUB_CREDENTIALS_JSON", '{"type": "service_account"}')

    assert config.get_pubsub_settings().credentials == {"type": "service_account"}


def test_invalid_json_credentials(monkeypatch):
    monkeypatch.setenv("PUBSUB_KEYFILE_JSON", "{not json")
    with pytest.raises(config.ConfigError):
        config.get_pubsub_settings()


def test_invalid_timeout(monkeypatch):
    monkeypatch.setenv("PUBSUB_TIMEOUT", "soon")
    with pytest.raises(config.ConfigError):
        config.get_pubsub_settings()


def test_replace_accepts_aliases():
    settings = config.PubsubSettings(project_id="base", timeout=5)
    updated = settings.replace(project="other", keyfile={"type": "service_account"}, timeout=None)

    assert updated.project_id == "other"
    assert updated.credentials == {"type": "service_account"}
    assert updated.timeout == 5
    assert settings.project_id == "base"


@pytest.mark.parametrize(
    "overrides",
    [
        {"timeout": "10"},
        {"timeout": True},
        {"scope": 42},
        {"client_config": ["a"]},
        {"emulator_host": 8085},
    ],
)
def test_replace_rejects_wrong_types(overrides):
    with pytest.raises(config.ConfigError):
        config.PubsubSettings().replace(**overrides)


def test_replace_rejects_unknown_field():
    with pytest.raises(config.ConfigError):
        config.PubsubSettings().replace(retries=3)
