from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Stable, machine-readable error kinds mapped to process exit codes."""

    SUCCESS = 0
    INTERNAL = 1
    USAGE = 2
    AUTH = 10
    RATE_LIMITED = 11
    UNAVAILABLE = 12
    UNSUPPORTED = 13
    ACTION_PLAN = 22


class DefiActionError(Exception):
    def __init__(
        self,
        code: ErrorCode,
        message: str,
        cause: BaseException | None = None,
    ):
        self.code = ErrorCode(code)
        self.message = message
        self.cause = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"

    @classmethod
    def wrap(
        cls, code: ErrorCode, message: str, cause: BaseException
    ) -> DefiActionError:
        return cls(code, message, cause)

    @property
    def retryable(self) -> bool:
        # Callers may back off and retry these; the planner itself never does.
        return self.code in (ErrorCode.UNAVAILABLE, ErrorCode.RATE_LIMITED)


def usage_error(message: str) -> DefiActionError:
    return DefiActionError(ErrorCode.USAGE, message)


def unsupported_error(message: str) -> DefiActionError:
    return DefiActionError(ErrorCode.UNSUPPORTED, message)


def unavailable_error(
    message: str, cause: BaseException | None = None
) -> DefiActionError:
    return DefiActionError(ErrorCode.UNAVAILABLE, message, cause)


def action_plan_error(
    message: str, cause: BaseException | None = None
) -> DefiActionError:
    return DefiActionError(ErrorCode.ACTION_PLAN, message, cause)


def exit_code(exc: BaseException | None) -> int:
    if exc is None:
        return int(ErrorCode.SUCCESS)
    if isinstance(exc, DefiActionError):
        return int(exc.code)
    return int(ErrorCode.INTERNAL)
