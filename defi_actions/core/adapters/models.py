from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from defi_actions.core.utils.base_units import format_decimal

_BASE_UNITS_RE = re.compile(r"^[0-9]+$")

StepType = Literal["approval", "swap", "bridge_send"]
StepStatus = Literal["pending"]
IntentType = Literal["swap", "bridge", "approve"]


def _read_only(value: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(value))


class AmountInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    amount_base_units: str
    amount_decimal: str | None = None
    decimals: int = Field(ge=0)

    @field_validator("amount_base_units")
    @classmethod
    def _canonical_base_units(cls, value: str) -> str:
        value = str(value).strip()
        if not _BASE_UNITS_RE.match(value):
            raise ValueError("amount_base_units must be a non-negative integer string")
        return value.lstrip("0") or "0"

    @classmethod
    def from_base_units(cls, base_units: str | int, decimals: int) -> AmountInfo:
        return cls(
            amount_base_units=str(base_units),
            amount_decimal=format_decimal(str(base_units), decimals),
            decimals=decimals,
        )


class Chain(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    slug: str
    caip2: str
    evm_chain_id: int


class Asset(BaseModel):
    model_config = ConfigDict(frozen=True)

    chain_id: str
    asset_id: str
    address: str
    symbol: str = ""
    decimals: int = 0


class FeeAmount(BaseModel):
    amount_base_units: str | None = None
    amount_decimal: str | None = None
    amount_usd: float | None = None


class FeeBreakdown(BaseModel):
    lp_fee: FeeAmount | None = None
    relayer_fee: FeeAmount | None = None
    gas_fee: FeeAmount | None = None
    total_fee_base_units: str | None = None
    total_fee_decimal: str | None = None
    total_fee_usd: float | None = None
    consistent_with_amount_delta: bool | None = None


class AmountSource(StrEnum):
    PROVIDER = "provider"
    DERIVED = "derived"


class ProviderFeeReport(BaseModel):
    """Raw fee inputs of a bridge quote, tagged with where each figure came from."""

    total_fee_base_units: str | None = None
    total_fee_usd: float | None = None
    output_base_units: str | None = None
    output_source: AmountSource = AmountSource.DERIVED
    lp_fee_base_units: str | None = None
    relayer_fee_base_units: str | None = None
    gas_fee_base_units: str | None = None
    relayer_fee_usd: float | None = None
    gas_fee_usd: float | None = None


class SwapQuoteRequest(BaseModel):
    chain: Chain
    from_asset: Asset
    to_asset: Asset
    amount_base_units: str
    amount_decimal: str = ""
    rpc_url: str | None = None


class BridgeQuoteRequest(BaseModel):
    from_chain: Chain
    to_chain: Chain
    from_asset: Asset
    to_asset: Asset
    amount_base_units: str
    amount_decimal: str = ""
    from_amount_for_gas: str | None = None


class SwapQuote(BaseModel):
    provider: str
    chain_id: str
    from_asset_id: str
    to_asset_id: str
    trade_type: Literal["exact-input"] = "exact-input"
    input_amount: AmountInfo
    estimated_out: AmountInfo
    estimated_gas_usd: float | None = None
    price_impact_pct: float | None = None
    route: str
    source_url: str | None = None
    fetched_at: str


class BridgeQuote(BaseModel):
    provider: str
    from_chain_id: str
    to_chain_id: str
    from_asset_id: str
    to_asset_id: str
    input_amount: AmountInfo
    from_amount_for_gas: str | None = None
    estimated_destination_native: AmountInfo | None = None
    estimated_out: AmountInfo
    estimated_fee_usd: float | None = None
    fee_breakdown: FeeBreakdown | None = None
    estimated_time_s: int = 0
    route: str
    source_url: str | None = None
    fetched_at: str


class ExecutionOptions(BaseModel):
    sender: str = ""
    recipient: str | None = None
    slippage_bps: int = 0
    simulate: bool = True
    rpc_url: str | None = None
    from_amount_for_gas: str | None = None


class Constraints(BaseModel):
    model_config = ConfigDict(frozen=True)

    slippage_bps: int | None = None
    deadline: str | None = None
    simulate: bool = True


class ActionStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    step_id: str
    type: StepType
    status: StepStatus = "pending"
    chain_id: str
    rpc_url: str | None = None
    description: str = ""
    target: str
    data: str
    value: str = "0"
    expected_outputs: Mapping[str, str] = Field(default_factory=dict, validate_default=True)

    @field_validator("expected_outputs")
    @classmethod
    def _freeze_outputs(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return _read_only(value)

    @field_serializer("expected_outputs")
    def _dump_outputs(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    action_id: str
    intent_type: IntentType
    provider: str
    status: Literal["planned"] = "planned"
    chain_id: str
    from_address: str | None = None
    to_address: str | None = None
    input_amount: str | None = None
    created_at: str
    updated_at: str
    constraints: Constraints = Constraints()
    steps: tuple[ActionStep, ...] = ()
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("metadata")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return _read_only(value)

    @field_serializer("metadata")
    def _dump_metadata(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)
