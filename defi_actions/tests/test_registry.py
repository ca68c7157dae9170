from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from defi_actions.adapters.across_adapter.adapter import AcrossAdapter
from defi_actions.adapters.lifi_adapter.adapter import LifiAdapter
from defi_actions.adapters.taikoswap_adapter.adapter import TaikoSwapAdapter
from defi_actions.core.errors import DefiActionError, ErrorCode
from defi_actions.core.execution.registry import ActionRegistry


def test_default_registry_is_closed_set():
    registry = ActionRegistry()
    assert sorted(registry.swap_adapters) == ["taikoswap"]
    assert registry.bridge_execution_provider_names() == ["across", "lifi"]
    assert isinstance(registry.swap_adapter("TaikoSwap"), TaikoSwapAdapter)
    assert isinstance(registry.bridge_adapter(" across "), AcrossAdapter)
    assert isinstance(registry.bridge_adapter("lifi"), LifiAdapter)


@pytest.mark.parametrize("name", ["", "   ", None])
def test_empty_provider_is_usage(name):
    with pytest.raises(DefiActionError) as exc:
        ActionRegistry().swap_adapter(name)
    assert exc.value.code == ErrorCode.USAGE


def test_unknown_swap_provider():
    with pytest.raises(DefiActionError, match="unsupported swap provider") as exc:
        ActionRegistry().swap_adapter("sushiswap")
    assert exc.value.code == ErrorCode.UNSUPPORTED


def test_quote_only_swap_provider():
    with pytest.raises(DefiActionError) as exc:
        ActionRegistry().swap_adapter("1inch")
    assert exc.value.code == ErrorCode.UNSUPPORTED
    assert str(exc.value) == "provider 1inch does not support swap planning"


def test_unknown_bridge_provider():
    with pytest.raises(DefiActionError, match="unsupported bridge provider"):
        ActionRegistry().bridge_adapter("wormhole")


def test_quote_only_bridge_provider_names_execution_providers():
    with pytest.raises(DefiActionError) as exc:
        ActionRegistry().bridge_adapter("Bungee")
    assert exc.value.code == ErrorCode.UNSUPPORTED
    assert str(exc.value) == (
        'bridge provider "bungee" is quote-only; execution providers: across,lifi'
    )


@pytest.mark.asyncio
async def test_build_dispatches_to_adapter():
    swap = MagicMock()
    swap.build_swap_action = AsyncMock(return_value="swap-action")
    bridge = MagicMock()
    bridge.build_bridge_action = AsyncMock(return_value="bridge-action")
    registry = ActionRegistry({"taikoswap": swap}, {"lifi": bridge})

    assert await registry.build_swap_action("taikoswap", "req", "opts") == "swap-action"
    assert await registry.build_bridge_action("LIFI", "req", "opts") == "bridge-action"
    swap.build_swap_action.assert_awaited_once_with("req", "opts")
    bridge.build_bridge_action.assert_awaited_once_with("req", "opts")
