from __future__ import annotations

import pytest
from eth_abi import decode
from eth_utils import to_checksum_address

from defi_actions.core.errors import DefiActionError, ErrorCode
from defi_actions.core.execution.approvals import ApprovalRequest, build_approval_action
from defi_actions.core.utils.ids import parse_asset, parse_chain

SENDER = "0xaAaAaAaaAaAaAaaAaAAAAAAAAaaaAaAaAaaAaaAa"
SPENDER = "0x" + "22" * 20
USDC_BASE = "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"


def _request(**overrides) -> ApprovalRequest:
    chain = parse_chain("base")
    fields = {
        "chain": chain,
        "asset": parse_asset(USDC_BASE, chain, symbol="usdc", decimals=6),
        "amount_base_units": "2500000",
        "sender": SENDER,
        "spender": SPENDER,
    }
    fields.update(overrides)
    return ApprovalRequest(**fields)


def test_builds_single_exact_approval():
    action = build_approval_action(_request(rpc_url="https://rpc.example"))

    assert action.intent_type == "approve"
    assert action.provider == "native"
    assert action.chain_id == "eip155:8453"
    assert action.from_address == to_checksum_address(SENDER)
    assert action.to_address == to_checksum_address(SPENDER)
    assert action.input_amount == "2500000"
    assert action.metadata == {
        "asset_id": f"eip155:8453/erc20:{USDC_BASE}",
        "spender": to_checksum_address(SPENDER),
    }

    (step,) = action.steps
    assert step.step_id == "approve-token"
    assert step.type == "approval"
    assert step.rpc_url == "https://rpc.example"
    assert step.description == "Approve USDC for spender"
    assert step.target == to_checksum_address(USDC_BASE)
    assert step.data.startswith("0x095ea7b3")
    spender, amount = decode(["address", "uint256"], bytes.fromhex(step.data[10:]))
    assert spender.lower() == SPENDER
    assert amount == 2_500_000


def test_uses_default_rpc_when_not_overridden():
    action = build_approval_action(_request())
    assert action.steps[0].rpc_url == "https://mainnet.base.org"


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"sender": ""}, "approval requires sender address"),
        ({"sender": "0x12"}, "approval sender must be a valid EVM address"),
        ({"spender": ""}, "approval requires spender address"),
        ({"spender": "spender"}, "approval spender must be a valid EVM address"),
        ({"amount_base_units": "0"}, "approval amount must be a positive integer in base units"),
        ({"amount_base_units": "1.5"}, "approval amount must be a positive integer in base units"),
    ],
)
def test_validation_errors(overrides, message):
    with pytest.raises(DefiActionError) as exc:
        build_approval_action(_request(**overrides))
    assert exc.value.code == ErrorCode.USAGE
    assert str(exc.value) == message


def test_unknown_chain_without_rpc_is_usage():
    chain = parse_chain("eip155:777777")
    asset = parse_asset(USDC_BASE, chain)
    with pytest.raises(DefiActionError) as exc:
        build_approval_action(_request(chain=chain, asset=asset))
    assert exc.value.code == ErrorCode.USAGE
