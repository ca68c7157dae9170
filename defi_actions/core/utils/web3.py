from contextlib import asynccontextmanager

from loguru import logger
from web3 import AsyncHTTPProvider, AsyncWeb3

from defi_actions.core.config import get_configured_rpc_url
from defi_actions.core.constants.chains import DEFAULT_RPC_URLS
from defi_actions.core.errors import usage_error


def resolve_rpc_url(chain_id: int, override: str | None = None) -> str:
    """Pick the RPC endpoint for a chain.

    Order: explicit override, then ``rpc_urls`` from config, then the
    built-in public endpoint table.
    """
    override = str(override or "").strip()
    if override:
        return override
    configured = get_configured_rpc_url(chain_id)
    if configured:
        return configured
    default = DEFAULT_RPC_URLS.get(int(chain_id))
    if default:
        return default
    raise usage_error(
        f"no default rpc configured for chain id {int(chain_id)}; provide rpc_url"
    )


def get_web3(rpc_url: str) -> AsyncWeb3:
    provider = AsyncHTTPProvider(
        rpc_url,
        request_kwargs={"headers": AsyncHTTPProvider.get_request_headers()},
    )
    return AsyncWeb3(provider)


@asynccontextmanager
async def web3_from_rpc_url(rpc_url: str):
    web3 = get_web3(rpc_url)
    logger.debug(f"Opened RPC session {rpc_url}")
    try:
        yield web3
    finally:
        await web3.provider.disconnect()
