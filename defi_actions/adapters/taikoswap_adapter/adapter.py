from __future__ import annotations

from typing import Any

from defi_actions.core.adapters.BaseAdapter import SwapExecutionAdapter
from defi_actions.core.adapters.models import (
    Action,
    ActionStep,
    AmountInfo,
    ExecutionOptions,
    SwapQuote,
    SwapQuoteRequest,
)
from defi_actions.core.constants.contracts import (
    TAIKOSWAP_CONTRACTS,
    TAIKOSWAP_SOURCE_URL,
    UNISWAP_V3_FEE_TIERS,
)
from defi_actions.core.constants.uniswap_v3_abi import UNISWAP_V3_ROUTER_ABI
from defi_actions.core.errors import unsupported_error, usage_error
from defi_actions.core.execution.actions import (
    new_action,
    resolve_addresses,
    resolve_slippage_bps,
    utc_now_rfc3339,
)
from defi_actions.core.execution.allowance import plan_approval_step
from defi_actions.core.execution.route_quoter import quote_best_fee_tier
from defi_actions.core.utils.abi import encode_function_call
from defi_actions.core.utils.base_units import apply_slippage, parse_base_units
from defi_actions.core.utils.ids import checksum, is_evm_address
from defi_actions.core.utils.web3 import resolve_rpc_url, web3_from_rpc_url

PROVIDER = "taikoswap"


def route_label(fee: int) -> str:
    return f"taikoswap-v3-fee-{fee}"


def _require_token_addresses(request: SwapQuoteRequest) -> None:
    if not is_evm_address(request.from_asset.address) or not is_evm_address(
        request.to_asset.address
    ):
        raise usage_error(
            "swap execution requires ERC20 token addresses for from/to assets"
        )


class TaikoSwapAdapter(SwapExecutionAdapter):
    """Uniswap-V3 style swaps on Taiko, routed by simulating every fee tier on-chain."""

    adapter_type: str = "TAIKOSWAP"

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        fee_tiers: tuple[int, ...] = UNISWAP_V3_FEE_TIERS,
    ):
        super().__init__("taikoswap_adapter", config)
        self.fee_tiers = tuple(fee_tiers)

    def _chain_config(
        self, chain_id: int, rpc_override: str | None
    ) -> tuple[str, str, str]:
        contracts = TAIKOSWAP_CONTRACTS.get(int(chain_id))
        if contracts is None:
            raise unsupported_error("taikoswap only supports taiko mainnet/hoodi chains")
        rpc_url = resolve_rpc_url(chain_id, rpc_override)
        return (
            rpc_url,
            checksum(contracts["quoter_v2"]),
            checksum(contracts["swap_router"]),
        )

    async def quote_swap(self, request: SwapQuoteRequest) -> SwapQuote:
        _require_token_addresses(request)
        rpc_url, quoter, _ = self._chain_config(
            request.chain.evm_chain_id, request.rpc_url
        )
        amount_in = parse_base_units(request.amount_base_units)

        async with web3_from_rpc_url(rpc_url) as web3:
            best = await quote_best_fee_tier(
                web3,
                quoter,
                request.from_asset.address,
                request.to_asset.address,
                amount_in,
                self.fee_tiers,
                provider=PROVIDER,
            )

        return SwapQuote(
            provider=PROVIDER,
            chain_id=request.chain.caip2,
            from_asset_id=request.from_asset.asset_id,
            to_asset_id=request.to_asset.asset_id,
            input_amount=AmountInfo(
                amount_base_units=request.amount_base_units,
                amount_decimal=request.amount_decimal or None,
                decimals=request.from_asset.decimals,
            ),
            estimated_out=AmountInfo.from_base_units(
                best.amount_out, request.to_asset.decimals
            ),
            route=route_label(best.fee),
            source_url=TAIKOSWAP_SOURCE_URL,
            fetched_at=utc_now_rfc3339(),
        )

    async def build_swap_action(
        self, request: SwapQuoteRequest, options: ExecutionOptions
    ) -> Action:
        sender, recipient = resolve_addresses(
            options.sender, options.recipient, intent="swap"
        )
        _require_token_addresses(request)
        slippage_bps = resolve_slippage_bps(options.slippage_bps)
        rpc_url, quoter, router = self._chain_config(
            request.chain.evm_chain_id, options.rpc_url or request.rpc_url
        )
        amount_in = parse_base_units(request.amount_base_units)
        token_in = checksum(request.from_asset.address)
        token_out = checksum(request.to_asset.address)
        chain_id = request.chain.caip2

        async with web3_from_rpc_url(rpc_url) as web3:
            best = await quote_best_fee_tier(
                web3,
                quoter,
                token_in,
                token_out,
                amount_in,
                self.fee_tiers,
                provider=PROVIDER,
            )
            amount_out_min = apply_slippage(best.amount_out, slippage_bps)
            approval = await plan_approval_step(
                web3,
                step_id="approve-token-in",
                chain_id=chain_id,
                rpc_url=rpc_url,
                token=token_in,
                owner=sender,
                spender=router,
                amount=amount_in,
                description="Approve token spending for swap router",
            )

        swap_data = encode_function_call(
            UNISWAP_V3_ROUTER_ABI,
            "exactInputSingle",
            [
                (
                    token_in,
                    token_out,
                    int(best.fee),
                    recipient,
                    amount_in,
                    amount_out_min,
                    0,
                )
            ],
        )
        steps = [approval] if approval is not None else []
        steps.append(
            ActionStep(
                step_id="swap-exact-input-single",
                type="swap",
                chain_id=chain_id,
                rpc_url=rpc_url,
                description="Swap exact input via TaikoSwap router",
                target=router,
                data=swap_data,
                value="0",
                expected_outputs={"amount_out_min": str(amount_out_min)},
            )
        )
        self.logger.info(
            f"Planned swap {token_in}->{token_out} fee={best.fee} "
            f"steps={len(steps)} min_out={amount_out_min}"
        )

        return new_action(
            intent_type="swap",
            provider=PROVIDER,
            steps=steps,
            from_address=sender,
            to_address=recipient,
            input_amount=str(amount_in),
            slippage_bps=slippage_bps,
            simulate=options.simulate,
            metadata={
                "token_in": token_in,
                "token_out": token_out,
                "fee": int(best.fee),
                "quoted_amount": str(best.amount_out),
                "amount_out_min": str(amount_out_min),
                "route": route_label(best.fee),
            },
        )
