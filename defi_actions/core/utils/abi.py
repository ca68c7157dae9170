from __future__ import annotations

from typing import Any

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError, EncodingError
from eth_utils import to_checksum_address
from eth_utils.abi import collapse_if_tuple, function_abi_to_4byte_selector
from hexbytes import HexBytes

from defi_actions.core.errors import DefiActionError, ErrorCode


def find_function_abi(abi: list[dict[str, Any]], fn_name: str) -> dict[str, Any]:
    for item in abi:
        if item.get("type") != "function":
            continue
        if item.get("name") == fn_name:
            return item
    raise DefiActionError(ErrorCode.INTERNAL, f"function ABI not found: {fn_name}")


def _types(params: list[dict[str, Any]]) -> list[str]:
    return [collapse_if_tuple(p) for p in params if isinstance(p, dict)]


def function_selector(abi: list[dict[str, Any]], fn_name: str) -> str:
    return "0x" + function_abi_to_4byte_selector(find_function_abi(abi, fn_name)).hex()


def encode_function_call(
    abi: list[dict[str, Any]], fn_name: str, args: list[Any] | tuple[Any, ...]
) -> str:
    """Encode ``fn_name(*args)`` as 0x-prefixed call data (selector + arguments)."""
    fn_abi = find_function_abi(abi, fn_name)
    try:
        selector = function_abi_to_4byte_selector(fn_abi)
        params = encode(_types(fn_abi.get("inputs") or []), list(args))
    except (EncodingError, TypeError, ValueError, OverflowError) as exc:
        raise DefiActionError.wrap(
            ErrorCode.INTERNAL, f"failed to encode {fn_name} call", exc
        ) from exc
    return "0x" + selector.hex() + params.hex()


def decode_function_result(
    abi: list[dict[str, Any]], fn_name: str, data: bytes | str
) -> tuple[Any, ...]:
    """Decode raw ``eth_call`` return data against the function's outputs.

    Addresses come back checksummed. Malformed payloads raise an ``INTERNAL``
    error; call sites reading from an RPC remap that to ``UNAVAILABLE``.
    """
    fn_abi = find_function_abi(abi, fn_name)
    output_types = _types(fn_abi.get("outputs") or [])
    if not output_types:
        return ()
    try:
        raw = bytes(HexBytes(data))
        values = decode(output_types, raw)
    except (DecodingError, TypeError, ValueError, OverflowError) as exc:
        raise DefiActionError.wrap(
            ErrorCode.INTERNAL, f"failed to decode {fn_name} result", exc
        ) from exc
    return tuple(
        to_checksum_address(v) if t == "address" else v
        for t, v in zip(output_types, values, strict=True)
    )
