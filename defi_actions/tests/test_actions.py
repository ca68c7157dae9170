import re

import pytest
from eth_utils import to_checksum_address
from pydantic import ValidationError

from defi_actions.core.adapters.models import ActionStep
from defi_actions.core.errors import DefiActionError, ErrorCode, exit_code
from defi_actions.core.execution.actions import (
    ensure_hex_prefix,
    first_non_empty,
    format_slippage,
    new_action,
    new_action_id,
    resolve_addresses,
    resolve_slippage_bps,
)

SENDER = "0x" + "ab" * 20


def test_action_id_format():
    assert re.fullmatch(r"act_[0-9a-f]{32}", new_action_id())
    assert new_action_id() != new_action_id()


def test_recipient_defaults_to_sender():
    assert resolve_addresses(SENDER, None, intent="swap") == (
        to_checksum_address(SENDER),
        to_checksum_address(SENDER),
    )


@pytest.mark.parametrize(
    "bps,want", [(0, 50), (-5, 50), (None, 50), (1, 1), (9999, 9999)]
)
def test_resolve_slippage(bps, want):
    assert resolve_slippage_bps(bps) == want


def test_slippage_at_denominator_is_usage():
    with pytest.raises(DefiActionError) as exc:
        resolve_slippage_bps(10000)
    assert exc.value.code == ErrorCode.USAGE
    assert exit_code(exc.value) == 2


@pytest.mark.parametrize("bps,want", [(50, "0.005000"), (100, "0.010000"), (9999, "0.999900")])
def test_format_slippage(bps, want):
    assert format_slippage(bps) == want


def test_small_helpers():
    assert ensure_hex_prefix("abc") == "0xabc"
    assert ensure_hex_prefix("0Xabc") == "0xabc"
    assert ensure_hex_prefix(None) == "0x"
    assert first_non_empty([None, " ", "x", "y"]) == "x"
    assert first_non_empty([]) == ""


def test_new_action_requires_steps():
    with pytest.raises(DefiActionError) as exc:
        new_action(
            intent_type="swap",
            provider="taikoswap",
            steps=[],
            from_address=None,
            to_address=None,
            input_amount="1",
            slippage_bps=50,
            simulate=True,
            metadata={},
        )
    assert exc.value.code == ErrorCode.INTERNAL


def test_new_action_is_frozen_and_planned():
    step = ActionStep(
        step_id="s", type="swap", chain_id="eip155:1", target=SENDER, data="0x"
    )
    action = new_action(
        intent_type="swap",
        provider="taikoswap",
        steps=[step],
        from_address=SENDER,
        to_address=SENDER,
        input_amount="1",
        slippage_bps=50,
        simulate=False,
        metadata={"k": "v"},
    )
    assert action.status == "planned"
    assert action.chain_id == "eip155:1"
    assert action.created_at == action.updated_at
    assert action.created_at.endswith("Z")
    assert action.constraints.simulate is False
    with pytest.raises(ValidationError):
        action.provider = "other"


def test_planned_mappings_are_read_only():
    outputs = {"amount_out_min": "1980"}
    step = ActionStep(
        step_id="s",
        type="swap",
        chain_id="eip155:1",
        target=SENDER,
        data="0x",
        expected_outputs=outputs,
    )
    metadata = {"route": "fee-500"}
    action = new_action(
        intent_type="swap",
        provider="taikoswap",
        steps=[step],
        from_address=SENDER,
        to_address=SENDER,
        input_amount="1",
        slippage_bps=50,
        simulate=True,
        metadata=metadata,
    )

    with pytest.raises(TypeError):
        action.steps[0].expected_outputs["amount_out_min"] = "0"
    with pytest.raises(TypeError):
        action.metadata["route"] = "other"

    outputs["amount_out_min"] = "0"
    metadata["route"] = "other"
    assert action.steps[0].expected_outputs["amount_out_min"] == "1980"
    assert action.metadata["route"] == "fee-500"
    dumped = action.model_dump()
    assert dumped["metadata"] == {"route": "fee-500"}
    assert dumped["steps"][0]["expected_outputs"] == {"amount_out_min": "1980"}
    assert ActionStep(
        step_id="s", type="swap", chain_id="eip155:1", target=SENDER, data="0x"
    ).expected_outputs == {}
