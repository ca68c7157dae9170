"""Closed mapping from provider names to action builders.

Only the providers listed here can plan transactions. Names that are known
quote sources but cannot plan are rejected as ``unsupported`` with a hint,
anything else is simply unknown.
"""

from __future__ import annotations

from collections.abc import Mapping

from defi_actions.adapters.across_adapter.adapter import AcrossAdapter
from defi_actions.adapters.lifi_adapter.adapter import LifiAdapter
from defi_actions.adapters.taikoswap_adapter.adapter import TaikoSwapAdapter
from defi_actions.core.adapters.BaseAdapter import (
    BridgeExecutionAdapter,
    SwapExecutionAdapter,
)
from defi_actions.core.adapters.models import (
    Action,
    BridgeQuoteRequest,
    ExecutionOptions,
    SwapQuoteRequest,
)
from defi_actions.core.errors import unsupported_error, usage_error
from defi_actions.core.execution.approvals import ApprovalRequest, build_approval_action

SWAP_QUOTE_ONLY_PROVIDERS = frozenset({"1inch", "uniswap", "jupiter", "fibrous"})
BRIDGE_QUOTE_ONLY_PROVIDERS = frozenset({"bungee"})


def _normalize(provider: str | None) -> str:
    name = str(provider or "").strip().lower()
    if not name:
        raise usage_error("provider is required")
    return name


def default_swap_adapters() -> dict[str, SwapExecutionAdapter]:
    return {"taikoswap": TaikoSwapAdapter()}


def default_bridge_adapters() -> dict[str, BridgeExecutionAdapter]:
    return {"across": AcrossAdapter(), "lifi": LifiAdapter()}


class ActionRegistry:
    def __init__(
        self,
        swap_adapters: Mapping[str, SwapExecutionAdapter] | None = None,
        bridge_adapters: Mapping[str, BridgeExecutionAdapter] | None = None,
    ):
        self.swap_adapters = dict(
            swap_adapters if swap_adapters is not None else default_swap_adapters()
        )
        self.bridge_adapters = dict(
            bridge_adapters
            if bridge_adapters is not None
            else default_bridge_adapters()
        )

    def bridge_execution_provider_names(self) -> list[str]:
        return sorted(self.bridge_adapters)

    def swap_adapter(self, provider: str) -> SwapExecutionAdapter:
        name = _normalize(provider)
        adapter = self.swap_adapters.get(name)
        if adapter is not None:
            return adapter
        if name in SWAP_QUOTE_ONLY_PROVIDERS:
            raise unsupported_error(f"provider {name} does not support swap planning")
        raise unsupported_error("unsupported swap provider")

    def bridge_adapter(self, provider: str) -> BridgeExecutionAdapter:
        name = _normalize(provider)
        adapter = self.bridge_adapters.get(name)
        if adapter is not None:
            return adapter
        if name in BRIDGE_QUOTE_ONLY_PROVIDERS:
            names = ",".join(self.bridge_execution_provider_names())
            raise unsupported_error(
                f'bridge provider "{name}" is quote-only; execution providers: {names}'
            )
        raise unsupported_error("unsupported bridge provider")

    async def build_swap_action(
        self, provider: str, request: SwapQuoteRequest, options: ExecutionOptions
    ) -> Action:
        return await self.swap_adapter(provider).build_swap_action(request, options)

    async def build_bridge_action(
        self, provider: str, request: BridgeQuoteRequest, options: ExecutionOptions
    ) -> Action:
        return await self.bridge_adapter(provider).build_bridge_action(
            request, options
        )

    def build_approval_action(self, request: ApprovalRequest) -> Action:
        return build_approval_action(request)

    async def close(self) -> None:
        for adapter in [*self.swap_adapters.values(), *self.bridge_adapters.values()]:
            await adapter.close()
