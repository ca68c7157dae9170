import json

from defi_actions.core import config
from defi_actions.core.constants.base import DEFAULT_HTTP_TIMEOUT


def test_load_config_from_env_path(tmp_path, monkeypatch):
    path = tmp_path / "cfg.json"
    path.write_text(
        json.dumps(
            {
                "rpc_urls": {"167000": "https://taiko.example"},
                "providers": {"lifi": {"base_url": "https://lifi.example/v1/", "api_key": "k"}},
                "system": {"http_timeout_s": 5},
            }
        )
    )
    monkeypatch.setenv("DEFI_ACTIONS_CONFIG_PATH", str(path))
    config.load_config()

    assert config.get_configured_rpc_url(167000) == "https://taiko.example"
    assert config.get_provider_base_url("lifi", "x") == "https://lifi.example/v1"
    assert config.get_provider_api_key("lifi") == "k"
    assert config.get_http_timeout() == 5.0


def test_missing_or_invalid_file_yields_empty(tmp_path):
    assert config.load_config_json(tmp_path / "nope.json") == {}
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    assert config.load_config_json(bad) == {}
    listy = tmp_path / "list.json"
    listy.write_text("[1, 2]")
    assert config.load_config_json(listy) == {}


def test_defaults_without_config(monkeypatch):
    monkeypatch.delenv("DEFI_ACTIONS_ACROSS_API_KEY", raising=False)
    assert config.get_configured_rpc_url(1) is None
    assert config.get_provider_base_url("across", "https://default") == "https://default"
    assert config.get_provider_api_key("across") is None
    assert config.get_http_timeout() == DEFAULT_HTTP_TIMEOUT


def test_api_key_env_fallback(monkeypatch):
    monkeypatch.setenv("DEFI_ACTIONS_LIFI_API_KEY", "env-key")
    assert config.get_provider_api_key("lifi") == "env-key"


def test_set_config_mutates_shared_dict():
    ref = config.CONFIG
    config.set_config({"rpc_urls": {"1": ["https://a", "https://b"]}})
    assert ref is config.CONFIG
    assert config.get_configured_rpc_url(1) == "https://a"


def test_non_positive_timeout_falls_back():
    config.set_config({"system": {"http_timeout_s": 0}})
    assert config.get_http_timeout() == DEFAULT_HTTP_TIMEOUT
