from __future__ import annotations

import re

from eth_utils import is_hex_address, to_checksum_address

from defi_actions.core.adapters.models import Asset, Chain
from defi_actions.core.constants.chains import CHAIN_CODE_TO_ID, CHAIN_NAMES
from defi_actions.core.errors import usage_error

_CAIP2_RE = re.compile(r"^eip155:([0-9]+)$")


def caip2(chain_id: int) -> str:
    return f"eip155:{int(chain_id)}"


def chain_from_id(chain_id: int) -> Chain:
    chain_id = int(chain_id)
    known = CHAIN_NAMES.get(chain_id)
    if known is None:
        return Chain(
            name=f"EVM-{chain_id}",
            slug=f"evm-{chain_id}",
            caip2=caip2(chain_id),
            evm_chain_id=chain_id,
        )
    name, slug = known
    return Chain(name=name, slug=slug, caip2=caip2(chain_id), evm_chain_id=chain_id)


def parse_chain(value: str | int) -> Chain:
    """Resolve a chain from a slug, a CAIP-2 id or a numeric EVM chain id."""
    if isinstance(value, int) and not isinstance(value, bool):
        return chain_from_id(value)
    norm = str(value or "").strip().lower()
    if not norm:
        raise usage_error("chain is required")

    chain_id = CHAIN_CODE_TO_ID.get(norm) or CHAIN_CODE_TO_ID.get(norm.replace(" ", "-"))
    if chain_id is not None:
        return chain_from_id(chain_id)

    m = _CAIP2_RE.match(norm)
    if m:
        return chain_from_id(int(m.group(1)))
    if norm.isdigit():
        return chain_from_id(int(norm))
    raise usage_error(f"unsupported chain input: {value}")


def parse_chain_id(caip2_id: str) -> int:
    m = _CAIP2_RE.match(str(caip2_id or "").strip().lower())
    if not m:
        raise usage_error(f"invalid CAIP-2 chain id: {caip2_id}")
    return int(m.group(1))


def is_evm_address(value: str | None) -> bool:
    return bool(value) and is_hex_address(str(value).strip())


def checksum(value: str) -> str:
    return to_checksum_address(str(value).strip())


def parse_asset(value: str, chain: Chain, *, symbol: str = "", decimals: int = 0) -> Asset:
    """Build an ERC-20 asset from a raw address or a CAIP-19 ``<chain>/erc20:<addr>`` id."""
    norm = str(value or "").strip()
    if not norm:
        raise usage_error("asset is required")

    address = norm
    prefix, sep, rest = norm.partition("/")
    if sep and ":" in rest:
        if prefix.lower() != chain.caip2:
            raise usage_error("asset chain does not match chain")
        namespace, _, address = rest.partition(":")
        if namespace.strip().lower() != "erc20":
            raise usage_error(
                f"unsupported asset namespace {namespace.strip().lower()} for chain {chain.caip2}"
            )
        address = address.strip()
    if not is_evm_address(address):
        raise usage_error(f"invalid token address for chain {chain.caip2}")

    address = address.lower()
    return Asset(
        chain_id=chain.caip2,
        asset_id=f"{chain.caip2}/erc20:{address}",
        address=address,
        symbol=symbol,
        decimals=decimals,
    )
