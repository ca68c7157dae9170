from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from defi_actions.core.adapters.models import (
    Action,
    BridgeQuote,
    BridgeQuoteRequest,
    ExecutionOptions,
    SwapQuote,
    SwapQuoteRequest,
)


class BaseAdapter(ABC):
    adapter_type: str | None = None

    def __init__(self, name: str, config: dict[str, Any] | None = None):
        self.name = name
        self.config = config or {}
        self.logger = logger.bind(adapter=self.__class__.__name__)

    async def close(self) -> None:
        pass


class SwapExecutionAdapter(BaseAdapter):
    """Provider that can both quote a swap and plan its transactions."""

    @abstractmethod
    async def quote_swap(self, request: SwapQuoteRequest) -> SwapQuote: ...

    @abstractmethod
    async def build_swap_action(
        self, request: SwapQuoteRequest, options: ExecutionOptions
    ) -> Action: ...


class BridgeExecutionAdapter(BaseAdapter):
    """Provider that can both quote a bridge transfer and plan its transactions."""

    @abstractmethod
    async def quote_bridge(self, request: BridgeQuoteRequest) -> BridgeQuote: ...

    @abstractmethod
    async def build_bridge_action(
        self, request: BridgeQuoteRequest, options: ExecutionOptions
    ) -> Action: ...
