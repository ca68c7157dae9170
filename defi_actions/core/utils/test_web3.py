from unittest.mock import AsyncMock, patch

import pytest

from defi_actions.core.config import set_rpc_urls
from defi_actions.core.constants.chains import (
    CHAIN_ID_BASE,
    CHAIN_ID_TAIKO,
    DEFAULT_RPC_URLS,
)
from defi_actions.core.errors import DefiActionError, ErrorCode
from defi_actions.core.utils.web3 import resolve_rpc_url, web3_from_rpc_url


def test_override_wins_over_config_and_defaults():
    set_rpc_urls({str(CHAIN_ID_BASE): "https://configured.example"})
    assert (
        resolve_rpc_url(CHAIN_ID_BASE, "  https://override.example ")
        == "https://override.example"
    )


def test_configured_url_wins_over_default():
    set_rpc_urls({str(CHAIN_ID_BASE): ["https://first.example", "https://second.example"]})
    assert resolve_rpc_url(CHAIN_ID_BASE) == "https://first.example"


def test_configured_url_accepts_int_keys():
    set_rpc_urls({CHAIN_ID_TAIKO: "https://taiko.example"})
    assert resolve_rpc_url(CHAIN_ID_TAIKO) == "https://taiko.example"


def test_falls_back_to_default_table():
    assert resolve_rpc_url(CHAIN_ID_TAIKO) == DEFAULT_RPC_URLS[CHAIN_ID_TAIKO]


def test_unknown_chain_without_override_is_usage_error():
    with pytest.raises(DefiActionError) as exc:
        resolve_rpc_url(424242)
    assert exc.value.code == ErrorCode.USAGE
    assert "chain id 424242" in str(exc.value)


@pytest.mark.asyncio
async def test_web3_session_disconnects_on_error():
    with patch(
        "web3.AsyncHTTPProvider.disconnect", new_callable=AsyncMock
    ) as disconnect:
        with pytest.raises(RuntimeError):
            async with web3_from_rpc_url("http://127.0.0.1:8545"):
                raise RuntimeError("boom")
    disconnect.assert_awaited_once()
