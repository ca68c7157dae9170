import json
import os
from pathlib import Path
from typing import Any

from defi_actions.core.constants.base import DEFAULT_HTTP_TIMEOUT

_CONFIG_ENV_KEYS = ("DEFI_ACTIONS_CONFIG_PATH", "DEFI_ACTIONS_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"


def _find_project_root(start: Path) -> Path | None:
    cur = start.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def _project_root() -> Path | None:
    return _find_project_root(Path.cwd()) or _find_project_root(Path(__file__).parent)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    env_path = next(
        (os.getenv(k, "").strip() for k in _CONFIG_ENV_KEYS if os.getenv(k)), ""
    )
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_absolute():
            return p
        root = _project_root()
        return (root / p) if root else p

    root = _project_root()
    return (root / _DEFAULT_CONFIG_FILENAME) if root else Path(_DEFAULT_CONFIG_FILENAME)


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        data = json.loads(cfg_path.read_text())
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


CONFIG: dict[str, Any] = load_config_json()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    This allows code that imported CONFIG at module import time to see updates.
    """
    CONFIG.clear()
    CONFIG.update(config)


def load_config(
    path: str | Path | None = None, *, require_exists: bool = False
) -> None:
    """Load config from disk into the global CONFIG dict."""
    set_config(load_config_json(path, require_exists=require_exists))


def set_rpc_urls(rpc_urls: dict[str, Any]) -> None:
    CONFIG["rpc_urls"] = dict(rpc_urls)


def get_rpc_urls() -> dict[str, Any]:
    return CONFIG.get("rpc_urls", {})


def get_configured_rpc_url(chain_id: int) -> str | None:
    mapping = get_rpc_urls()
    rpc = mapping.get(str(chain_id))
    if rpc is None:
        rpc = mapping.get(chain_id)  # allow int keys
    if isinstance(rpc, list):
        rpc = rpc[0] if rpc else None
    if rpc is None:
        return None
    rpc = str(rpc).strip()
    return rpc or None


def get_provider_base_url(provider: str, default: str) -> str:
    providers = CONFIG.get("providers", {})
    entry = providers.get(provider, {}) if isinstance(providers, dict) else {}
    base_url = entry.get("base_url") if isinstance(entry, dict) else None
    if base_url:
        return str(base_url).strip().rstrip("/")
    return default


def get_provider_api_key(provider: str) -> str | None:
    providers = CONFIG.get("providers", {})
    entry = providers.get(provider, {}) if isinstance(providers, dict) else {}
    api_key = entry.get("api_key") if isinstance(entry, dict) else None
    if api_key:
        return str(api_key).strip()
    return os.environ.get(f"DEFI_ACTIONS_{provider.upper()}_API_KEY")


def get_http_timeout() -> float:
    system = CONFIG.get("system", {})
    raw = system.get("http_timeout_s") if isinstance(system, dict) else None
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_HTTP_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_HTTP_TIMEOUT
