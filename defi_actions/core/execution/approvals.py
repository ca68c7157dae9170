from __future__ import annotations

from pydantic import BaseModel

from defi_actions.core.adapters.models import Action, Asset, Chain
from defi_actions.core.errors import DefiActionError, ErrorCode, usage_error
from defi_actions.core.execution.actions import new_action
from defi_actions.core.execution.allowance import build_approve_step
from defi_actions.core.utils.ids import checksum, is_evm_address
from defi_actions.core.utils.web3 import resolve_rpc_url

APPROVAL_PROVIDER = "native"


class ApprovalRequest(BaseModel):
    chain: Chain
    asset: Asset
    amount_base_units: str
    sender: str = ""
    spender: str = ""
    simulate: bool = True
    rpc_url: str | None = None


def _positive_amount(value: str) -> int:
    text = str(value or "").strip()
    if not text.isdigit() or int(text) <= 0:
        raise usage_error("approval amount must be a positive integer in base units")
    return int(text)


def build_approval_action(request: ApprovalRequest) -> Action:
    """Plan a single ``approve(spender, amount)`` for an ERC-20 token.

    No allowance is read: the caller asked for an approval explicitly.
    """
    sender = request.sender.strip()
    if not sender:
        raise usage_error("approval requires sender address")
    if not is_evm_address(sender):
        raise usage_error("approval sender must be a valid EVM address")
    spender = request.spender.strip()
    if not spender:
        raise usage_error("approval requires spender address")
    if not is_evm_address(spender):
        raise usage_error("approval spender must be a valid EVM address")
    if not is_evm_address(request.asset.address):
        raise usage_error("approval requires ERC20 token address")
    amount = _positive_amount(request.amount_base_units)

    try:
        rpc_url = resolve_rpc_url(request.chain.evm_chain_id, request.rpc_url)
    except DefiActionError as exc:
        raise DefiActionError.wrap(ErrorCode.USAGE, "resolve rpc url", exc) from exc

    step = build_approve_step(
        step_id="approve-token",
        chain_id=request.chain.caip2,
        rpc_url=rpc_url,
        token=request.asset.address,
        spender=spender,
        amount=amount,
        description=f"Approve {request.asset.symbol.upper()} for spender",
    )
    return new_action(
        intent_type="approve",
        provider=APPROVAL_PROVIDER,
        steps=[step],
        from_address=checksum(sender),
        to_address=checksum(spender),
        input_amount=str(amount),
        slippage_bps=None,
        simulate=request.simulate,
        metadata={
            "asset_id": request.asset.asset_id,
            "spender": checksum(spender),
        },
        chain_id=request.chain.caip2,
    )
