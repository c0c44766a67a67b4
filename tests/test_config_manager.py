import pytest

from scrobble_cli.exceptions import ConfigurationError
from scrobble_cli.models.config import DEFAULT_USER_AGENT
from scrobble_cli.storage.config_manager import ConfigManager
from tests.factories import API_KEY, SHARED_SECRET


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "scrobble-cli" / "config.ini"


@pytest.fixture
def manager(config_file):
    manager = ConfigManager(config_file)
    manager.save_new_config({"api_key": API_KEY, "shared_secret": SHARED_SECRET})
    return manager


def test_missing_file_raises(config_file):
    with pytest.raises(ConfigurationError, match="init"):
        ConfigManager(config_file).load_config()


def test_saved_config_round_trips_with_defaults(manager, config_file):
    config = manager.load_config()

    assert config.api_key == API_KEY
    assert config.shared_secret == SHARED_SECRET
    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.offset_in_seconds == 0
    assert not config.is_logged_in
    assert config.config_path == str(config_file.parent)


def test_credentials_are_normalized_to_lowercase(config_file):
    manager = ConfigManager(config_file)
    manager.save_new_config({"api_key": API_KEY.upper(), "shared_secret": SHARED_SECRET})
    assert manager.load_config().api_key == API_KEY


def test_invalid_api_key_is_rejected(config_file):
    manager = ConfigManager(config_file)
    manager.save_new_config({"api_key": "not-a-key", "shared_secret": SHARED_SECRET})

    with pytest.raises(ConfigurationError, match="validation failed"):
        manager.load_config()


def test_cli_options_override_the_file(manager):
    assert manager.load_config({"offset_in_seconds": 900}).offset_in_seconds == 900


def test_negative_offset_is_rejected(manager):
    with pytest.raises(ConfigurationError):
        manager.load_config({"offset_in_seconds": -5})


def test_non_numeric_offset_is_rejected(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        f"[DEFAULT]\napi_key = {API_KEY}\nshared_secret = {SHARED_SECRET}\n"
        "offset_in_seconds = soon\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigurationError, match="offset_in_seconds"):
        ConfigManager(config_file).load_config()


def test_missing_keys_are_migrated(config_file):
    config_file.parent.mkdir(parents=True)
    config_file.write_text(
        f"[DEFAULT]\napi_key = {API_KEY}\nshared_secret = {SHARED_SECRET}\n",
        encoding="utf-8",
    )

    config = ConfigManager(config_file).load_config()

    assert config.user_agent == DEFAULT_USER_AGENT
    content = config_file.read_text(encoding="utf-8")
    assert "user_agent" in content
    assert "session_key" in content


def test_update_session_persists_the_login(manager, config_file):
    manager.update_session("user", "abc123")

    config = ConfigManager(config_file).load_config()
    assert config.username == "user"
    assert config.session_key == "abc123"
    assert config.is_logged_in

    manager.update_session("", "")
    assert not ConfigManager(config_file).load_config().is_logged_in


def test_update_session_requires_a_config(config_file):
    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).update_session("user", "abc123")
