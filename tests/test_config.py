import pytest

from core.config_manager import API_URL_ENV, SyncConfig, get_config
from core.exceptions import ConfigError


@pytest.fixture(autouse=True)
def no_env_url(monkeypatch):
    monkeypatch.delenv(API_URL_ENV, raising=False)


def test_defaults_without_runtime_file(tmp_path):
    cfg = get_config(tmp_path / "missing.yaml")

    assert cfg == SyncConfig()
    assert cfg.CONCURRENT_SYNC_POLICY == "reject"


def test_yaml_overrides_known_keys_only(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text(
        "API_URL: https://api.telofy.test/\n"
        "CONCURRENT_SYNC_POLICY: queue\n"
        "DEFAULT_PRIORITY: 3\n"
        "NOT_A_SETTING: 1\n",
        encoding="utf-8",
    )

    cfg = get_config(path)

    assert cfg.API_URL == "https://api.telofy.test"
    assert cfg.CONCURRENT_SYNC_POLICY == "queue"
    assert cfg.DEFAULT_PRIORITY == 3
    assert not hasattr(cfg, "NOT_A_SETTING")


def test_env_url_beats_yaml(tmp_path, monkeypatch):
    path = tmp_path / "runtime.yaml"
    path.write_text("API_URL: https://from-yaml.test\n", encoding="utf-8")
    monkeypatch.setenv(API_URL_ENV, "https://from-env.test/")

    assert get_config(path).API_URL == "https://from-env.test"


def test_malformed_yaml_is_ignored(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("API_URL: [unclosed\n", encoding="utf-8")

    assert get_config(path).API_URL == "http://localhost:3000"


def test_unknown_policy_is_rejected(tmp_path):
    path = tmp_path / "runtime.yaml"
    path.write_text("CONCURRENT_SYNC_POLICY: drop\n", encoding="utf-8")

    with pytest.raises(ConfigError) as exc_info:
        get_config(path)

    assert str(path) in exc_info.value.get_user_message()
