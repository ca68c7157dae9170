from __future__ import annotations

import asyncio
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from loguru import logger
from web3 import AsyncWeb3

from defi_actions.core.constants.contracts import UNISWAP_V3_FEE_TIERS
from defi_actions.core.constants.uniswap_v3_abi import UNISWAP_V3_QUOTER_V2_ABI
from defi_actions.core.errors import DefiActionError, unavailable_error
from defi_actions.core.utils.abi import decode_function_result, encode_function_call
from defi_actions.core.utils.ids import checksum


@dataclass(frozen=True)
class RouteCandidate:
    route: str
    amount_out: int
    gas_estimate: int = 0
    fee: int | None = None


def _beats(candidate: RouteCandidate, best: RouteCandidate) -> bool:
    if candidate.amount_out != best.amount_out:
        return candidate.amount_out > best.amount_out
    return candidate.gas_estimate < best.gas_estimate


def select_best_route(candidates: Iterable[RouteCandidate]) -> RouteCandidate:
    """Greatest simulated output wins; exact ties go to the lower gas estimate.

    Candidates with a non-positive output are ignored. If nothing usable
    remains the route is unavailable, never a zero-output pick.
    """
    best: RouteCandidate | None = None
    for candidate in candidates:
        if candidate.amount_out <= 0:
            continue
        if best is None or _beats(candidate, best):
            best = candidate
    if best is None:
        raise unavailable_error("no route returned a positive output")
    return best


def passthrough_route(quoted_out: int | str, route: str) -> RouteCandidate:
    """Trust a REST provider's own best route."""
    raw = str(quoted_out).strip()
    if not raw.isdigit():
        raise unavailable_error(f"{route} quote returned malformed output amount")
    return select_best_route([RouteCandidate(route=route, amount_out=int(raw))])


async def _quote_fee_tier(
    web3: AsyncWeb3,
    quoter: str,
    token_in: str,
    token_out: str,
    amount_in: int,
    fee: int,
) -> RouteCandidate | None:
    data = encode_function_call(
        UNISWAP_V3_QUOTER_V2_ABI,
        "quoteExactInputSingle",
        [(checksum(token_in), checksum(token_out), int(amount_in), int(fee), 0)],
    )
    try:
        raw = await web3.eth.call({"to": checksum(quoter), "data": data})
    except asyncio.CancelledError:
        raise
    except Exception as exc:  # noqa: BLE001 - reverted/missing pools are skipped
        logger.debug(f"Fee tier {fee} quote failed: {exc}")
        return None
    try:
        amount_out, _, _, gas_estimate = decode_function_result(
            UNISWAP_V3_QUOTER_V2_ABI, "quoteExactInputSingle", raw
        )
    except DefiActionError as exc:
        logger.debug(f"Fee tier {fee} returned undecodable data: {exc}")
        return None
    return RouteCandidate(
        route=f"fee-{fee}",
        amount_out=int(amount_out),
        gas_estimate=int(gas_estimate),
        fee=int(fee),
    )


async def quote_best_fee_tier(
    web3: AsyncWeb3,
    quoter: str,
    token_in: str,
    token_out: str,
    amount_in: int,
    fee_tiers: Sequence[int] = UNISWAP_V3_FEE_TIERS,
    *,
    provider: str = "uniswap-v3",
) -> RouteCandidate:
    """Simulate ``quoteExactInputSingle`` on every fee tier and keep the best."""
    candidates: list[RouteCandidate] = []
    for fee in fee_tiers:
        candidate = await _quote_fee_tier(
            web3, quoter, token_in, token_out, amount_in, fee
        )
        if candidate is None:
            continue
        if candidate.amount_out <= 0:
            logger.debug(f"Fee tier {fee} returned no output")
            continue
        candidates.append(candidate)

    if not candidates:
        raise unavailable_error(f"{provider} quote unavailable for token pair")
    best = select_best_route(candidates)
    logger.info(
        f"Selected fee tier {best.fee} out={best.amount_out} gas={best.gas_estimate}"
    )
    return best
