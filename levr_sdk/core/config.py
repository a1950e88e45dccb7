import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from levr_sdk.core.constants.base import (
    DEFAULT_MULTICALL_CHUNK_SIZE,
    TREASURY_AIRDROP_AMOUNTS_V1,
    TREASURY_AIRDROP_TABLE_VERSION,
)
from levr_sdk.core.constants.chains import DEFAULT_RPC_URLS
from levr_sdk.core.constants.contracts import (
    LEVR_CONTRACTS_BY_CHAIN,
    MULTICALL3_ADDRESS,
)
from levr_sdk.core.errors import ConfigurationError

_CONFIG_ENV_KEYS = ("LEVR_CONFIG_PATH", "LEVR_CONFIG")
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
    except json.JSONDecodeError as exc:
        logger.warning(f"Ignoring unreadable config file {cfg_path}: {exc}")
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


def _chain_entry(mapping: dict[str, Any], chain_id: int) -> Any:
    value = mapping.get(str(chain_id))
    if value is None:
        value = mapping.get(chain_id)  # allow int keys
    return value


def set_rpc_urls(rpc_urls: dict[str, Any]) -> None:
    CONFIG["rpc_urls"] = rpc_urls


def get_rpc_urls() -> dict[str, Any]:
    return CONFIG.get("rpc_urls", {})


def get_rpc_urls_for_chain(chain_id: int) -> list[str]:
    rpcs = _chain_entry(get_rpc_urls(), chain_id)
    if rpcs is None:
        rpcs = DEFAULT_RPC_URLS.get(chain_id)
    if not rpcs:
        raise ConfigurationError(f"No RPCs configured for chain ID {chain_id}")
    if isinstance(rpcs, str):
        return [rpcs]
    return list(rpcs)


def get_contract_address(chain_id: int, name: str) -> str | None:
    """Resolve a named contract for a chain: config.json first, then built-ins."""
    overrides = _chain_entry(CONFIG.get("contracts", {}), chain_id) or {}
    address = overrides.get(name)
    if address:
        return str(address).strip()
    return LEVR_CONTRACTS_BY_CHAIN.get(chain_id, {}).get(name)


def require_contract_address(chain_id: int, name: str) -> str:
    address = get_contract_address(chain_id, name)
    if not address:
        raise ConfigurationError(f"No {name} address configured for chain {chain_id}")
    return address


def get_multicall_chunk_size() -> int:
    raw = CONFIG.get("multicall", {}).get("chunk_size")
    try:
        size = int(raw) if raw is not None else DEFAULT_MULTICALL_CHUNK_SIZE
    except (TypeError, ValueError):
        size = DEFAULT_MULTICALL_CHUNK_SIZE
    return max(1, size)


def get_treasury_airdrop_amounts() -> tuple[str, tuple[int, ...]]:
    """Return ``(version, amounts_in_whole_tokens)`` for the treasury airdrop table."""
    section = CONFIG.get("treasury_airdrop", {})
    amounts = section.get("amounts")
    if not amounts:
        return TREASURY_AIRDROP_TABLE_VERSION, TREASURY_AIRDROP_AMOUNTS_V1
    version = str(section.get("version") or "custom")
    return version, tuple(int(a) for a in amounts)


def get_multicall_address(chain_id: int) -> str:
    return get_contract_address(chain_id, "multicall3") or MULTICALL3_ADDRESS
