from __future__ import annotations

import asyncio

from web3 import AsyncWeb3

from defi_actions.core.adapters.models import ActionStep
from defi_actions.core.constants.erc20_abi import ERC20_MINIMAL_ABI
from defi_actions.core.errors import DefiActionError, unavailable_error
from defi_actions.core.utils.abi import decode_function_result, encode_function_call
from defi_actions.core.utils.ids import checksum


async def read_allowance(
    web3: AsyncWeb3, token: str, owner: str, spender: str
) -> int:
    data = encode_function_call(
        ERC20_MINIMAL_ABI, "allowance", [checksum(owner), checksum(spender)]
    )
    try:
        raw = await web3.eth.call({"to": checksum(token), "data": data})
    except asyncio.CancelledError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise unavailable_error("read allowance", exc) from exc
    try:
        (allowance,) = decode_function_result(ERC20_MINIMAL_ABI, "allowance", raw)
    except DefiActionError as exc:
        raise unavailable_error("decode allowance", exc) from exc
    return int(allowance)


def build_approve_step(
    *,
    step_id: str,
    chain_id: str,
    rpc_url: str | None,
    token: str,
    spender: str,
    amount: int,
    description: str,
) -> ActionStep:
    data = encode_function_call(
        ERC20_MINIMAL_ABI, "approve", [checksum(spender), int(amount)]
    )
    return ActionStep(
        step_id=step_id,
        type="approval",
        chain_id=chain_id,
        rpc_url=rpc_url,
        description=description,
        target=checksum(token),
        data=data,
        value="0",
    )


async def plan_approval_step(
    web3: AsyncWeb3,
    *,
    step_id: str,
    chain_id: str,
    rpc_url: str | None,
    token: str,
    owner: str,
    spender: str,
    amount: int,
    description: str,
) -> ActionStep | None:
    """Approval step for exactly ``amount`` when the allowance falls short, else None."""
    allowance = await read_allowance(web3, token, owner, spender)
    if allowance >= int(amount):
        return None
    return build_approve_step(
        step_id=step_id,
        chain_id=chain_id,
        rpc_url=rpc_url,
        token=token,
        spender=spender,
        amount=amount,
        description=description,
    )
