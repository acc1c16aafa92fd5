from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from mcmeta.meta.results import MetaResult

# ==== Error taxonomy (frozen) ====
E_UNKNOWN_FLAG = "E_UNKNOWN_FLAG"
E_BAD_NUMERIC = "E_BAD_NUMERIC"
E_UNKNOWN_COMMAND = "E_UNKNOWN_COMMAND"
E_FLAG_NOT_ALLOWED = "E_FLAG_NOT_ALLOWED"
E_NO_COMMAND = "E_NO_COMMAND"
E_BAD_DIRECTIVE = "E_BAD_DIRECTIVE"


class MetaFlagError(ValueError):
    """Structural decode failure of a response flag token. Never retryable."""

    code = "E_META_FLAG"

    def __init__(self, message: str, *, flag: str, argument: str = "") -> None:
        super().__init__(message)
        self.flag = flag
        self.argument = argument
        # Accumulator state at the point of failure; callers discard it.
        self.partial: Optional["MetaResult"] = None


class UnknownFlagError(MetaFlagError):
    code = E_UNKNOWN_FLAG

    def __init__(self, flag: str) -> None:
        msg = f"Invalid flag: {flag}" if flag else "Invalid flag: empty token"
        super().__init__(msg, flag=flag)


class MalformedNumericArgumentError(MetaFlagError):
    code = E_BAD_NUMERIC

    def __init__(self, flag: str, argument: str, reason: str) -> None:
        super().__init__(f"Bad argument for flag {flag}: {argument!r} ({reason})", flag=flag, argument=argument)
