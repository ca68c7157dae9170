from __future__ import annotations

import secrets
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime
from typing import Any

from defi_actions.core.adapters.models import Action, ActionStep, Constraints, IntentType
from defi_actions.core.constants.base import BPS_DENOMINATOR, DEFAULT_SLIPPAGE_BPS
from defi_actions.core.errors import DefiActionError, ErrorCode, usage_error
from defi_actions.core.utils.ids import checksum, is_evm_address


def new_action_id() -> str:
    return f"act_{secrets.token_hex(16)}"


def utc_now_rfc3339() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def resolve_addresses(
    sender: str | None, recipient: str | None, *, intent: str
) -> tuple[str, str]:
    """Validate the sender and default the recipient to it. Returns checksummed addresses."""
    sender = str(sender or "").strip()
    if not sender:
        raise usage_error(f"{intent} execution requires sender address")
    if not is_evm_address(sender):
        raise usage_error(f"{intent} execution sender must be a valid EVM address")
    recipient = str(recipient or "").strip() or sender
    if not is_evm_address(recipient):
        raise usage_error(f"{intent} execution recipient must be a valid EVM address")
    return checksum(sender), checksum(recipient)


def resolve_slippage_bps(slippage_bps: int | None) -> int:
    bps = int(slippage_bps or 0)
    if bps <= 0:
        return DEFAULT_SLIPPAGE_BPS
    if bps >= BPS_DENOMINATOR:
        raise usage_error(f"slippage bps must be less than {BPS_DENOMINATOR}")
    return bps


def format_slippage(bps: int) -> str:
    """Slippage as a fraction with six decimals, e.g. 50 -> ``"0.005000"``."""
    whole, frac = divmod(int(bps) * 100, 1_000_000)
    return f"{whole}.{frac:06d}"


def ensure_hex_prefix(value: str | None) -> str:
    clean = str(value or "").strip()
    if clean[:2].lower() == "0x":
        return "0x" + clean[2:]
    return "0x" + clean


def first_non_empty(values: Iterable[Any]) -> str:
    for value in values:
        text = str(value).strip() if value is not None else ""
        if text:
            return text
    return ""


def new_action(
    *,
    intent_type: IntentType,
    provider: str,
    steps: Sequence[ActionStep],
    from_address: str | None,
    to_address: str | None,
    input_amount: str | None,
    slippage_bps: int | None,
    simulate: bool,
    metadata: dict[str, Any],
    chain_id: str | None = None,
) -> Action:
    """Assemble a planned, frozen ``Action``.

    ``chain_id`` defaults to the chain of the first step; an action with no
    steps is never produced.
    """
    if not steps:
        raise DefiActionError(ErrorCode.INTERNAL, "action plan produced no steps")
    now = utc_now_rfc3339()
    return Action(
        action_id=new_action_id(),
        intent_type=intent_type,
        provider=provider,
        chain_id=chain_id or steps[0].chain_id,
        from_address=from_address,
        to_address=to_address,
        input_amount=input_amount,
        created_at=now,
        updated_at=now,
        constraints=Constraints(slippage_bps=slippage_bps, simulate=simulate),
        steps=tuple(steps),
        metadata=dict(metadata),
    )
