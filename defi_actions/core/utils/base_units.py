"""Exact integer arithmetic over token amounts expressed in base units.

Amounts travel through the planner as unsigned decimal-digit strings. All
math happens on Python ``int`` so values past 2**63 stay exact; nothing in
this module ever touches ``float``.
"""

from __future__ import annotations

import re

from defi_actions.core.constants.base import BPS_DENOMINATOR
from defi_actions.core.errors import action_plan_error, usage_error

_DIGITS_RE = re.compile(r"^[0-9]+$")
_DECIMAL_RE = re.compile(r"^[0-9]+(\.[0-9]+)?$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def _is_digits(value: str) -> bool:
    return bool(_DIGITS_RE.match(value))


def trim_leading_zeros(value: str | None) -> str:
    """Canonical form of a base-unit string; non-digit input reads as ``"0"``."""
    value = str(value or "").strip()
    if not _is_digits(value):
        return "0"
    return value.lstrip("0") or "0"


def compare_base_units(a: str, b: str) -> int:
    left = int(trim_leading_zeros(a))
    right = int(trim_leading_zeros(b))
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def subtract_base_units(a: str, b: str) -> str:
    """``a - b`` saturating at ``"0"``."""
    left = int(trim_leading_zeros(a))
    right = int(trim_leading_zeros(b))
    if left <= right:
        return "0"
    return str(left - right)


def apply_slippage(amount: int | str, slippage_bps: int) -> int:
    """Minimum acceptable output: ``floor(amount * (10000 - bps) / 10000)``."""
    bps = int(slippage_bps)
    if bps < 0 or bps >= BPS_DENOMINATOR:
        raise usage_error(f"slippage bps must be between 0 and {BPS_DENOMINATOR - 1}")
    value = int(trim_leading_zeros(str(amount)))
    return (value * (BPS_DENOMINATOR - bps)) // BPS_DENOMINATOR


def parse_base_units(value: str | int | None, *, field: str = "amount") -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise usage_error(f"{field} must be non-negative")
        return value
    text = str(value or "").strip()
    if not text:
        raise usage_error(f"{field} is required")
    if text.startswith("-") and _is_digits(text[1:]):
        raise usage_error(f"{field} must be non-negative")
    if not _is_digits(text):
        raise usage_error(f"{field} must be a base-unit integer string")
    return int(text)


def format_decimal(base_units: str | int, decimals: int) -> str:
    """Render base units as a decimal string with trailing fraction zeros trimmed."""
    digits = trim_leading_zeros(str(base_units))
    if decimals <= 0:
        return digits
    if len(digits) <= decimals:
        digits = "0" * (decimals - len(digits) + 1) + digits
    int_part = digits[:-decimals]
    frac_part = digits[-decimals:].rstrip("0")
    if not frac_part:
        return int_part
    return f"{int_part}.{frac_part}"


def _normalize_decimal(value: str) -> str:
    if "." not in value:
        return value.lstrip("0") or "0"
    int_part, frac_part = value.split(".", 1)
    int_part = int_part.lstrip("0") or "0"
    frac_part = frac_part.rstrip("0")
    if not frac_part:
        return int_part
    return f"{int_part}.{frac_part}"


def _decimal_to_base_units(value: str, decimals: int) -> str:
    int_part, _, frac_part = value.partition(".")
    if len(frac_part) > decimals:
        raise usage_error(f"decimal precision exceeds token decimals ({decimals})")
    frac_part = frac_part.ljust(decimals, "0")
    return (int_part + frac_part).lstrip("0") or "0"


def normalize_amount(
    base_units: str | None, amount_decimal: str | None, decimals: int
) -> tuple[str, str]:
    """Resolve exactly one of a base-unit or a decimal amount.

    Returns ``(base_units, decimal)`` with both renderings canonicalized.
    """
    base_units = str(base_units or "").strip()
    amount_decimal = str(amount_decimal or "").strip()
    if base_units and amount_decimal:
        raise usage_error("use either amount or amount_decimal, not both")
    if not base_units and not amount_decimal:
        raise usage_error("amount is required")
    if decimals < 0:
        raise usage_error("decimals must be >= 0")

    if base_units:
        value = parse_base_units(base_units)
        return str(value), format_decimal(str(value), decimals)

    if not _DECIMAL_RE.match(amount_decimal):
        raise usage_error("amount_decimal must be in decimal form like 1.23")
    return (
        _decimal_to_base_units(amount_decimal, decimals),
        _normalize_decimal(amount_decimal),
    )


def hex_to_decimal(value: str | None) -> str:
    """Decode a ``0x`` quantity into a base-10 string (empty input is zero)."""
    text = str(value or "").strip()
    if text.lower().startswith("0x"):
        text = text[2:]
    if not text:
        return "0"
    if not _HEX_RE.match(text):
        raise action_plan_error(f"invalid hex quantity: {value}")
    return str(int(text, 16))


def normalize_transaction_value(value: str | int | None) -> str:
    """Provider ``value`` fields arrive as hex or decimal; emit decimal."""
    if value is None:
        return "0"
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise action_plan_error(f"invalid transaction value: {value}")
        return str(value)
    text = str(value).strip()
    if not text:
        return "0"
    if text.lower().startswith("0x"):
        return hex_to_decimal(text)
    if not _is_digits(text):
        raise action_plan_error(f"invalid transaction value: {value}")
    return trim_leading_zeros(text)


def normalize_optional_base_units(
    value: str | None, *, field: str = "amount"
) -> str | None:
    """Optional strictly positive base-unit amount; blank input means unset."""
    text = str(value or "").strip()
    if not text:
        return None
    if not _is_digits(text) or int(text) <= 0:
        raise usage_error(f"{field} must be a positive integer in base units")
    return trim_leading_zeros(text)
