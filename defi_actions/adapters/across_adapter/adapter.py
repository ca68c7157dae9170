from __future__ import annotations

from typing import Any

import httpx

from defi_actions.core.adapters.BaseAdapter import BridgeExecutionAdapter
from defi_actions.core.adapters.models import (
    Action,
    ActionStep,
    AmountInfo,
    AmountSource,
    BridgeQuote,
    BridgeQuoteRequest,
    ExecutionOptions,
    ProviderFeeReport,
)
from defi_actions.core.clients.HttpJsonClient import HttpJsonClient
from defi_actions.core.config import get_provider_base_url
from defi_actions.core.constants.base import DEFAULT_BRIDGE_FILL_TIME_S
from defi_actions.core.constants.endpoints import ACROSS_API_BASE_URL
from defi_actions.core.errors import action_plan_error, unavailable_error, usage_error
from defi_actions.core.execution.actions import (
    ensure_hex_prefix,
    first_non_empty,
    format_slippage,
    new_action,
    resolve_addresses,
    resolve_slippage_bps,
    utc_now_rfc3339,
)
from defi_actions.core.execution.fees import approximate_stable_usd, build_fee_breakdown
from defi_actions.core.execution.route_quoter import passthrough_route
from defi_actions.core.utils.base_units import (
    compare_base_units,
    normalize_transaction_value,
    parse_base_units,
    subtract_base_units,
    trim_leading_zeros,
)
from defi_actions.core.utils.ids import checksum, is_evm_address
from defi_actions.core.utils.web3 import resolve_rpc_url

PROVIDER = "across"
ACROSS_SOURCE_URL = "https://app.across.to"


def number_string(value: Any) -> str:
    """Across reports amounts as strings, numbers or ``{"total"|"amount": ...}``."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        text = value.strip()
        return trim_leading_zeros(text) if text else ""
    if isinstance(value, int):
        return trim_leading_zeros(str(value))
    if isinstance(value, float):
        return trim_leading_zeros(f"{value:.0f}")
    if isinstance(value, dict):
        return number_string(value.get("total")) or number_string(value.get("amount"))
    return ""


def float_value(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip()) if value.strip() else None
        except ValueError:
            return None
    if isinstance(value, dict):
        usd = float_value(value.get("usd"))
        return usd if usd is not None else float_value(value.get("value"))
    return None


def pick_number_string(data: dict[str, Any], *keys: str) -> str:
    for key in keys:
        out = number_string(data.get(key))
        if out:
            return out
    return ""


def pick_float(data: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        out = float_value(data.get(key))
        if out is not None:
            return out
    return None


def amount_within_limits(amount: str, limits: dict[str, Any]) -> bool:
    low = pick_number_string(limits, "minDeposit", "minLimit")
    high = pick_number_string(limits, "maxDeposit", "maxLimit")
    if low and compare_base_units(amount, low) < 0:
        return False
    if high and compare_base_units(amount, high) > 0:
        return False
    return True


def _chain_id_of(tx: dict[str, Any]) -> int:
    try:
        return int(tx.get("chainId") or 0)
    except (TypeError, ValueError):
        return 0


class AcrossAdapter(BridgeExecutionAdapter):
    adapter_type: str = "ACROSS"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__("across_adapter", config)
        self.base_url = (
            base_url or get_provider_base_url(PROVIDER, ACROSS_API_BASE_URL)
        ).rstrip("/")
        self._client = client

    def _http(self) -> HttpJsonClient:
        return HttpJsonClient(
            base_url=self.base_url, provider=PROVIDER, client=self._client
        )

    @property
    def settlement_status_endpoint(self) -> str:
        return f"{self.base_url}/deposit/status"

    async def quote_bridge(self, request: BridgeQuoteRequest) -> BridgeQuote:
        amount = str(parse_base_units(request.amount_base_units))
        params = {
            "originChainId": request.from_chain.evm_chain_id,
            "destinationChainId": request.to_chain.evm_chain_id,
            "token": request.from_asset.address,
            "amount": amount,
        }
        async with self._http() as http:
            limits = await http.get_json("/limits", params)
            if not isinstance(limits, dict):
                raise unavailable_error("across limits response was not an object")
            if not amount_within_limits(amount, limits):
                raise usage_error("amount is outside across bridge limits")
            fees = await http.get_json("/suggested-fees", params)
        if not isinstance(fees, dict):
            raise unavailable_error("across fees response was not an object")

        from_decimals = request.from_asset.decimals
        total_fee = pick_number_string(fees, "totalRelayFee", "relayFeeTotal")
        provider_out = pick_number_string(fees, "outputAmount")
        if provider_out:
            estimated_out, source = provider_out, AmountSource.PROVIDER
        elif total_fee:
            estimated_out, source = subtract_base_units(amount, total_fee), AmountSource.DERIVED
        else:
            estimated_out, source = amount, AmountSource.DERIVED
        passthrough_route(estimated_out, PROVIDER)

        fee_usd = pick_float(fees, "totalRelayFeeUsd", "feeUsd") or None
        if fee_usd is None and total_fee:
            fee_usd = approximate_stable_usd(
                request.from_asset.symbol, total_fee, from_decimals
            )
        fill_time = int(pick_float(fees, "estimatedFillTimeSec", "estimatedFillTime") or 0)

        report = ProviderFeeReport(
            total_fee_base_units=total_fee or None,
            total_fee_usd=fee_usd,
            output_base_units=estimated_out,
            output_source=source,
            lp_fee_base_units=pick_number_string(fees, "lpFee", "lpFeeTotal") or None,
            relayer_fee_base_units=pick_number_string(
                fees, "relayerCapitalFee", "capitalFeeTotal"
            )
            or None,
            gas_fee_base_units=pick_number_string(
                fees, "relayerGasFee", "relayGasFeeTotal"
            )
            or None,
        )

        return BridgeQuote(
            provider=PROVIDER,
            from_chain_id=request.from_chain.caip2,
            to_chain_id=request.to_chain.caip2,
            from_asset_id=request.from_asset.asset_id,
            to_asset_id=request.to_asset.asset_id,
            input_amount=AmountInfo(
                amount_base_units=amount,
                amount_decimal=request.amount_decimal or None,
                decimals=from_decimals,
            ),
            estimated_out=AmountInfo.from_base_units(
                estimated_out, request.to_asset.decimals
            ),
            estimated_fee_usd=fee_usd,
            fee_breakdown=build_fee_breakdown(report, amount, from_decimals),
            estimated_time_s=fill_time or DEFAULT_BRIDGE_FILL_TIME_S,
            route=f"{request.from_chain.slug}->{request.to_chain.slug}",
            source_url=ACROSS_SOURCE_URL,
            fetched_at=utc_now_rfc3339(),
        )

    async def build_bridge_action(
        self, request: BridgeQuoteRequest, options: ExecutionOptions
    ) -> Action:
        sender, recipient = resolve_addresses(
            options.sender, options.recipient, intent="bridge"
        )
        if not is_evm_address(request.from_asset.address) or not is_evm_address(
            request.to_asset.address
        ):
            raise usage_error(
                "bridge execution requires ERC20 token addresses for from/to assets"
            )
        slippage_bps = resolve_slippage_bps(options.slippage_bps)
        amount = str(parse_base_units(request.amount_base_units))
        from_chain_id = request.from_chain.evm_chain_id

        params = {
            "amount": amount,
            "inputToken": request.from_asset.address,
            "outputToken": request.to_asset.address,
            "originChainId": from_chain_id,
            "destinationChainId": request.to_chain.evm_chain_id,
            "depositor": sender,
            "recipient": recipient,
            "slippage": format_slippage(slippage_bps),
        }
        async with self._http() as http:
            resp = await http.get_json("/swap/approval", params)
        if not isinstance(resp, dict):
            raise unavailable_error("across execution response was not an object")

        swap_tx = resp.get("swapTx") or {}
        if not str(swap_tx.get("to") or "").strip() or not str(
            swap_tx.get("data") or ""
        ).strip():
            raise unavailable_error(
                "across execution response missing swap transaction payload"
            )
        swap_chain = _chain_id_of(swap_tx)
        if swap_chain and swap_chain != from_chain_id:
            raise action_plan_error(
                "across swap transaction chain does not match source chain"
            )

        rpc_url = resolve_rpc_url(from_chain_id, options.rpc_url)
        chain_id = request.from_chain.caip2

        steps: list[ActionStep] = []
        for i, approval in enumerate(resp.get("approvalTxns") or []):
            if not isinstance(approval, dict):
                continue
            if not str(approval.get("to") or "").strip() or not str(
                approval.get("data") or ""
            ).strip():
                continue
            approval_chain = _chain_id_of(approval)
            if approval_chain and approval_chain != from_chain_id:
                continue
            steps.append(
                ActionStep(
                    step_id=f"approve-bridge-token-{i + 1}",
                    type="approval",
                    chain_id=chain_id,
                    rpc_url=rpc_url,
                    description="Approve across bridge contract for source token",
                    target=self._target(approval["to"]),
                    data=ensure_hex_prefix(approval["data"]),
                    value=normalize_transaction_value(approval.get("value")),
                )
            )

        bridge_step = (resp.get("steps") or {}).get("bridge") or {}
        steps.append(
            ActionStep(
                step_id="bridge-transfer",
                type="bridge_send",
                chain_id=chain_id,
                rpc_url=rpc_url,
                description="Bridge transfer via Across",
                target=self._target(swap_tx["to"]),
                data=ensure_hex_prefix(swap_tx["data"]),
                value=normalize_transaction_value(swap_tx.get("value")),
                expected_outputs={
                    "to_amount_min": first_non_empty(
                        [
                            resp.get("minOutputAmount"),
                            resp.get("expectedOutputAmount"),
                            bridge_step.get("outputAmount"),
                        ]
                    ),
                    "settlement_provider": PROVIDER,
                    "settlement_status_endpoint": self.settlement_status_endpoint,
                    "settlement_origin_chain": str(from_chain_id),
                    "settlement_recipient": recipient,
                    "settlement_destination_chain": str(
                        request.to_chain.evm_chain_id
                    ),
                },
            )
        )
        self.logger.info(
            f"Planned across bridge {request.from_chain.slug}->{request.to_chain.slug} "
            f"steps={len(steps)}"
        )

        return new_action(
            intent_type="bridge",
            provider=PROVIDER,
            steps=steps,
            from_address=sender,
            to_address=recipient,
            input_amount=amount,
            slippage_bps=slippage_bps,
            simulate=options.simulate,
            metadata={
                "to_chain_id": request.to_chain.caip2,
                "from_asset_id": request.from_asset.asset_id,
                "to_asset_id": request.to_asset.asset_id,
                "route": PROVIDER,
            },
        )

    @staticmethod
    def _target(address: str) -> str:
        if not is_evm_address(address):
            raise action_plan_error(f"across returned an invalid target address: {address}")
        return checksum(address)
