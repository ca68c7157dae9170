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
from defi_actions.core.config import get_provider_api_key, get_provider_base_url
from defi_actions.core.constants.base import NATIVE_PLACEHOLDER_ADDRESS, ZERO_ADDRESS
from defi_actions.core.constants.endpoints import LIFI_API_BASE_URL
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
from defi_actions.core.execution.allowance import plan_approval_step
from defi_actions.core.execution.fees import build_fee_breakdown
from defi_actions.core.execution.route_quoter import passthrough_route
from defi_actions.core.utils.base_units import (
    hex_to_decimal,
    normalize_optional_base_units,
    parse_base_units,
)
from defi_actions.core.utils.ids import checksum, is_evm_address
from defi_actions.core.utils.web3 import resolve_rpc_url, web3_from_rpc_url

PROVIDER = "lifi"
LIFI_SOURCE_URL = "https://li.quest"
# Placeholder sender for quote-only requests; LiFi requires some fromAddress.
QUOTE_FROM_ADDRESS = "0x0000000000000000000000000000000000000001"
QUOTE_SLIPPAGE = "0.005"
_NATIVE_ADDRESSES = {ZERO_ADDRESS, NATIVE_PLACEHOLDER_ADDRESS.lower()}


def is_native_token_address(address: str | None) -> bool:
    return str(address or "").strip().lower() in _NATIVE_ADDRESSES


def should_add_approval(token: str | None, spender: str | None) -> bool:
    token = str(token or "").strip()
    spender = str(spender or "").strip()
    if not token or not spender:
        return False
    if not is_evm_address(token):
        return False
    return not is_native_token_address(token)


def _sum_usd(costs: Any) -> float:
    total = 0.0
    for item in costs or []:
        if not isinstance(item, dict):
            continue
        try:
            total += float(item.get("amountUSD") or 0)
        except (TypeError, ValueError):
            continue
    return total


def _duration_seconds(value: Any) -> int:
    try:
        return int(float(value or 0))
    except (TypeError, ValueError, OverflowError) as exc:
        raise unavailable_error("lifi quote returned malformed execution duration", exc) from exc


def destination_native_estimate(
    steps: Any, destination_chain_id: int
) -> AmountInfo | None:
    for step in steps or []:
        if not isinstance(step, dict):
            continue
        action = step.get("action") or {}
        try:
            to_chain = int(action.get("toChainId") or 0)
        except (TypeError, ValueError):
            continue
        if to_chain != int(destination_chain_id):
            continue
        to_token = action.get("toToken") or {}
        if not is_native_token_address(to_token.get("address")):
            continue
        amount = str((step.get("estimate") or {}).get("toAmount") or "").strip()
        if not amount.isdigit():
            continue
        decimals = int(to_token.get("decimals") or 0)
        if decimals <= 0:
            decimals = 18
        return AmountInfo.from_base_units(amount, decimals)
    return None


class LifiAdapter(BridgeExecutionAdapter):
    adapter_type: str = "LIFI"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__("lifi_adapter", config)
        self.base_url = (
            base_url or get_provider_base_url(PROVIDER, LIFI_API_BASE_URL)
        ).rstrip("/")
        self._client = client

    def _http(self) -> HttpJsonClient:
        api_key = get_provider_api_key(PROVIDER)
        return HttpJsonClient(
            base_url=self.base_url,
            provider=PROVIDER,
            client=self._client,
            headers={"x-lifi-api-key": api_key} if api_key else None,
        )

    @property
    def settlement_status_endpoint(self) -> str:
        return f"{self.base_url}/status"

    async def _get_quote(self, params: dict[str, Any]) -> dict[str, Any]:
        async with self._http() as http:
            resp = await http.get_json("/quote", params)
        if not isinstance(resp, dict):
            raise unavailable_error("lifi quote response was not an object")
        return resp

    async def quote_bridge(self, request: BridgeQuoteRequest) -> BridgeQuote:
        from_amount_for_gas = normalize_optional_base_units(
            request.from_amount_for_gas, field="from_amount_for_gas"
        )
        amount = str(parse_base_units(request.amount_base_units))
        resp = await self._get_quote(
            {
                "fromChain": request.from_chain.evm_chain_id,
                "toChain": request.to_chain.evm_chain_id,
                "fromToken": request.from_asset.address,
                "toToken": request.to_asset.address,
                "fromAmount": amount,
                "slippage": QUOTE_SLIPPAGE,
                "fromAddress": QUOTE_FROM_ADDRESS,
                "fromAmountForGas": from_amount_for_gas,
            }
        )

        estimate = resp.get("estimate") or {}
        to_amount = str(estimate.get("toAmount") or "").strip()
        if not to_amount:
            raise unavailable_error("lifi quote missing output amount")
        passthrough_route(to_amount, PROVIDER)

        protocol_fee_usd = _sum_usd(estimate.get("feeCosts"))
        gas_fee_usd = _sum_usd(estimate.get("gasCosts"))
        fee_usd = protocol_fee_usd + gas_fee_usd
        report = ProviderFeeReport(
            total_fee_usd=fee_usd,
            output_base_units=to_amount,
            output_source=AmountSource.PROVIDER,
            relayer_fee_usd=protocol_fee_usd,
            gas_fee_usd=gas_fee_usd,
        )
        tool_details = resp.get("toolDetails") or {}
        route = str(tool_details.get("name") or "").strip() or (
            f"{request.from_chain.slug}->{request.to_chain.slug}"
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
                decimals=request.from_asset.decimals,
            ),
            from_amount_for_gas=from_amount_for_gas,
            estimated_destination_native=destination_native_estimate(
                resp.get("includedSteps"), request.to_chain.evm_chain_id
            ),
            estimated_out=AmountInfo.from_base_units(
                to_amount, request.to_asset.decimals
            ),
            estimated_fee_usd=fee_usd,
            fee_breakdown=build_fee_breakdown(
                report, amount, request.from_asset.decimals
            ),
            estimated_time_s=_duration_seconds(estimate.get("executionDuration")),
            route=route,
            source_url=LIFI_SOURCE_URL,
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
        from_amount_for_gas = normalize_optional_base_units(
            first_non_empty([options.from_amount_for_gas, request.from_amount_for_gas]),
            field="from_amount_for_gas",
        )
        amount = parse_base_units(request.amount_base_units)
        from_chain_id = request.from_chain.evm_chain_id
        to_chain_id = request.to_chain.evm_chain_id

        resp = await self._get_quote(
            {
                "fromChain": from_chain_id,
                "toChain": to_chain_id,
                "fromToken": request.from_asset.address.lower(),
                "toToken": request.to_asset.address.lower(),
                "fromAmount": str(amount),
                "slippage": format_slippage(slippage_bps),
                "fromAddress": sender,
                "toAddress": recipient,
                "fromAmountForGas": from_amount_for_gas,
            }
        )

        tx_request = resp.get("transactionRequest") or {}
        to = str(tx_request.get("to") or "").strip()
        data = str(tx_request.get("data") or "").strip()
        if not to or not data:
            raise unavailable_error("lifi quote missing executable transaction payload")
        try:
            tx_chain = int(tx_request.get("chainId") or 0)
        except (TypeError, ValueError) as exc:
            raise action_plan_error("lifi transaction chain id is not an integer", exc) from exc
        if tx_chain and tx_chain != from_chain_id:
            raise action_plan_error("lifi transaction chain does not match source chain")
        if not is_evm_address(to):
            raise action_plan_error(f"lifi returned an invalid target address: {to}")
        bridge_value = hex_to_decimal(tx_request.get("value"))

        rpc_url = resolve_rpc_url(from_chain_id, options.rpc_url)
        chain_id = request.from_chain.caip2
        estimate = resp.get("estimate") or {}
        tool_details = resp.get("toolDetails") or {}
        spender = str(estimate.get("approvalAddress") or "").strip()
        native_estimate = destination_native_estimate(
            resp.get("includedSteps"), to_chain_id
        )

        steps: list[ActionStep] = []
        if should_add_approval(request.from_asset.address, spender):
            if not is_evm_address(spender):
                raise action_plan_error("lifi quote returned invalid approval address")
            async with web3_from_rpc_url(rpc_url) as web3:
                approval = await plan_approval_step(
                    web3,
                    step_id="approve-bridge-token",
                    chain_id=chain_id,
                    rpc_url=rpc_url,
                    token=request.from_asset.address,
                    owner=sender,
                    spender=spender,
                    amount=amount,
                    description="Approve bridge spender for source token",
                )
            if approval is not None:
                steps.append(approval)

        expected_outputs = {
            "to_amount_min": first_non_empty(
                [estimate.get("toAmountMin"), estimate.get("toAmount")]
            ),
            "settlement_provider": PROVIDER,
            "settlement_status_endpoint": self.settlement_status_endpoint,
            "settlement_bridge": first_non_empty(
                [tool_details.get("key"), resp.get("tool")]
            ),
            "settlement_from_chain": str(from_chain_id),
            "settlement_to_chain": str(to_chain_id),
            "settlement_recipient": recipient,
            "settlement_quote_response_id": str(resp.get("id") or ""),
        }
        if native_estimate is not None:
            expected_outputs["destination_native_estimated"] = (
                native_estimate.amount_base_units
            )
        steps.append(
            ActionStep(
                step_id="bridge-transfer",
                type="bridge_send",
                chain_id=chain_id,
                rpc_url=rpc_url,
                description="Bridge transfer via LiFi route",
                target=checksum(to),
                data=ensure_hex_prefix(data),
                value=bridge_value,
                expected_outputs=expected_outputs,
            )
        )

        metadata: dict[str, Any] = {
            "to_chain_id": request.to_chain.caip2,
            "from_asset_id": request.from_asset.asset_id,
            "to_asset_id": request.to_asset.asset_id,
            "route": first_non_empty([tool_details.get("name"), resp.get("tool")]),
            "approval_spender": spender,
        }
        if from_amount_for_gas:
            metadata["from_amount_for_gas"] = from_amount_for_gas
        if native_estimate is not None:
            metadata["estimated_destination_native_base_units"] = (
                native_estimate.amount_base_units
            )
        self.logger.info(
            f"Planned lifi bridge {request.from_chain.slug}->{request.to_chain.slug} "
            f"steps={len(steps)}"
        )

        return new_action(
            intent_type="bridge",
            provider=PROVIDER,
            steps=steps,
            from_address=sender,
            to_address=recipient,
            input_amount=str(amount),
            slippage_bps=slippage_bps,
            simulate=options.simulate,
            metadata=metadata,
        )
