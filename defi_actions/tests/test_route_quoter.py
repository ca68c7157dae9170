import pytest

from defi_actions.core.errors import DefiActionError, ErrorCode
from defi_actions.core.execution.route_quoter import (
    RouteCandidate,
    passthrough_route,
    select_best_route,
)


def test_highest_output_wins():
    candidates = [
        RouteCandidate("fee-100", 1000, 50_000, 100),
        RouteCandidate("fee-500", 2000, 50_000, 500),
        RouteCandidate("fee-3000", 1500, 50_000, 3000),
    ]
    best = select_best_route(candidates)
    assert best is candidates[1]
    assert best.fee == 500


def test_tie_goes_to_lower_gas():
    best = select_best_route(
        [RouteCandidate("a", 2000, 90_000), RouteCandidate("b", 2000, 80_000)]
    )
    assert best.route == "b"


def test_exact_tie_keeps_first():
    best = select_best_route(
        [RouteCandidate("a", 2000, 80_000), RouteCandidate("b", 2000, 80_000)]
    )
    assert best.route == "a"


def test_non_positive_outputs_are_skipped():
    best = select_best_route([RouteCandidate("zero", 0), RouteCandidate("one", 1)])
    assert best.route == "one"


@pytest.mark.parametrize("candidates", [[], [RouteCandidate("zero", 0)]])
def test_nothing_usable_is_unavailable(candidates):
    with pytest.raises(DefiActionError) as exc:
        select_best_route(candidates)
    assert exc.value.code == ErrorCode.UNAVAILABLE


def test_passthrough_route():
    assert passthrough_route("997367", "across").amount_out == 997367
    with pytest.raises(DefiActionError):
        passthrough_route("0", "across")


@pytest.mark.parametrize("quoted", ["1e18", "-5", "", "12.5"])
def test_passthrough_route_rejects_malformed_amount(quoted):
    with pytest.raises(DefiActionError, match="lifi quote returned malformed output amount") as exc:
        passthrough_route(quoted, "lifi")
    assert exc.value.code == ErrorCode.UNAVAILABLE
