"""Best-effort fee breakdowns for bridge quotes.

Fee data is informational: missing fields are omitted rather than failing the
quote. The one cross-check, ``consistent_with_amount_delta``, is only
asserted when both sides of the comparison came from the provider.
"""

from __future__ import annotations

from defi_actions.core.adapters.models import (
    AmountSource,
    FeeAmount,
    FeeBreakdown,
    ProviderFeeReport,
)
from defi_actions.core.constants.base import STABLE_SYMBOLS
from defi_actions.core.utils.base_units import (
    compare_base_units,
    format_decimal,
    subtract_base_units,
    trim_leading_zeros,
)


def is_likely_stable_symbol(symbol: str | None) -> bool:
    return str(symbol or "").strip().upper() in STABLE_SYMBOLS


def approximate_stable_usd(
    symbol: str | None, base_units: str | None, decimals: int
) -> float | None:
    """Read a stablecoin amount as USD at par; None for anything else."""
    if not is_likely_stable_symbol(symbol):
        return None
    digits = trim_leading_zeros(base_units)
    if digits == "0":
        return None
    return float(format_decimal(digits, decimals))


def fee_amount(
    base_units: str | None, decimals: int, *, usd: float | None = None
) -> FeeAmount | None:
    digits = trim_leading_zeros(base_units) if base_units else "0"
    has_base = digits != "0"
    has_usd = bool(usd)
    if not has_base and not has_usd:
        return None
    return FeeAmount(
        amount_base_units=digits if has_base else None,
        amount_decimal=format_decimal(digits, decimals) if has_base else None,
        amount_usd=usd if has_usd else None,
    )


def build_fee_breakdown(
    report: ProviderFeeReport, input_amount: str, decimals: int
) -> FeeBreakdown | None:
    breakdown = FeeBreakdown(
        lp_fee=fee_amount(report.lp_fee_base_units, decimals),
        relayer_fee=fee_amount(
            report.relayer_fee_base_units, decimals, usd=report.relayer_fee_usd
        ),
        gas_fee=fee_amount(report.gas_fee_base_units, decimals, usd=report.gas_fee_usd),
        total_fee_usd=report.total_fee_usd or None,
    )

    total = (report.total_fee_base_units or "").strip()
    if total:
        breakdown.total_fee_base_units = trim_leading_zeros(total)
        breakdown.total_fee_decimal = format_decimal(
            breakdown.total_fee_base_units, decimals
        )

    output = (report.output_base_units or "").strip()
    if (
        report.output_source is AmountSource.PROVIDER
        and output
        and breakdown.total_fee_base_units is not None
    ):
        delta = subtract_base_units(input_amount, output)
        breakdown.consistent_with_amount_delta = (
            compare_base_units(delta, breakdown.total_fee_base_units) == 0
        )

    if (
        breakdown.lp_fee is None
        and breakdown.relayer_fee is None
        and breakdown.gas_fee is None
        and breakdown.total_fee_usd is None
        and breakdown.total_fee_base_units is None
        and breakdown.consistent_with_amount_delta is None
    ):
        return None
    return breakdown
