from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List

# Request-side flag keys understood by the meta commands (mg/ms/md/ma).
REQUEST_FLAG_KEYS = frozenset("bcfhlOqstuvNRTCFIMJD")

UINT32_MAX = (1 << 32) - 1
UINT64_MAX = (1 << 64) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_NO_ARG_KEYS = frozenset("bcfhlqstuvI")
_TEXT_KEYS = frozenset("OM")
# key -> (lo, hi) of the decimal argument
_NUMERIC_KEYS = {
    "N": (0, UINT64_MAX),
    "R": (0, UINT64_MAX),
    "T": (0, UINT64_MAX),
    "J": (0, UINT64_MAX),
    "D": (0, UINT64_MAX),
    "F": (0, UINT32_MAX),
    "C": (INT64_MIN, INT64_MAX),
}

_UNSIGNED_RE = re.compile(r"[0-9]+")
_SIGNED_RE = re.compile(r"[+-]?[0-9]+")


def parse_decimal(text: str, *, signed: bool) -> int:
    """Strict base-10 parse: ASCII digits only, a sign only when ``signed``.

    int() alone would also accept whitespace, underscores and non-ASCII digits.
    """
    pattern = _SIGNED_RE if signed else _UNSIGNED_RE
    if not text.isascii() or pattern.fullmatch(text) is None:
        raise ValueError(f"not a base-10 integer: {text!r}")
    return int(text, 10)


@dataclass(frozen=True)
class FlagDirective:
    """One request flag: a single-letter key plus an optional argument.

    Use the ``with_*`` constructors below rather than building these by hand.
    """

    key: str
    argument: str = ""

    def __post_init__(self) -> None:
        k, v = self.key, self.argument
        if k not in REQUEST_FLAG_KEYS:
            raise ValueError(f"unsupported request flag: {k!r}")
        if not isinstance(v, str):
            raise TypeError(f"flag {k} argument must be a str, got {type(v).__name__}")
        if k in _NO_ARG_KEYS:
            if v:
                raise ValueError(f"flag {k} takes no argument: {v!r}")
        elif k in _TEXT_KEYS:
            if not v or any(ch.isspace() for ch in v):
                raise ValueError(f"flag {k} argument must be non-empty and contain no whitespace: {v!r}")
        else:
            lo, hi = _NUMERIC_KEYS[k]
            n = parse_decimal(v, signed=lo < 0)
            # the token must be the canonical decimal form of an in-range value
            if str(n) != v or n < lo or n > hi:
                raise ValueError(f"flag {k} argument must be a decimal in [{lo}, {hi}]: {v!r}")

    @property
    def token(self) -> str:
        return self.key + self.argument


def build_meta_flags(directives: Iterable[FlagDirective]) -> str:
    """Serialize directives into the space-joined flag string of a request line.

    Order is kept exactly as given. No validation happens here: duplicates,
    conflicts and command support are the caller's concern.
    """
    tokens: List[str] = [d.token for d in directives]
    return " ".join(tokens)


def _format_int(value: int, *, lo: int, hi: int, what: str) -> str:
    # bool is an int subclass; True would silently become "1"
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{what} must be an int, got {type(value).__name__}")
    if value < lo or value > hi:
        raise ValueError(f"{what} out of range [{lo}, {hi}]: {value}")
    return str(value)


def _uint64(value: int, what: str) -> str:
    return _format_int(value, lo=0, hi=UINT64_MAX, what=what)


def _text_token(value: str, what: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a str, got {type(value).__name__}")
    if not value or any(ch.isspace() for ch in value):
        raise ValueError(f"{what} must be non-empty and contain no whitespace: {value!r}")
    return value


# ---- no-argument flags ----


def with_binary() -> FlagDirective:
    """b: interpret key as base64 encoded binary value (mg, ms, md, ma)."""
    return FlagDirective("b")


def with_cas() -> FlagDirective:
    """c: return item cas token (mg, ms, ma)."""
    return FlagDirective("c")


def with_flag() -> FlagDirective:
    """f: return client flags token (mg)."""
    return FlagDirective("f")


def with_hit() -> FlagDirective:
    """h: return whether item has been hit before as a 0 or 1 (mg)."""
    return FlagDirective("h")


def with_last_access() -> FlagDirective:
    """l: return time since item was last accessed in seconds (mg)."""
    return FlagDirective("l")


def with_quiet() -> FlagDirective:
    """q: use noreply semantics for return codes (mg, ms, md, ma)."""
    return FlagDirective("q")


def with_size() -> FlagDirective:
    """s: return item size token (mg)."""
    return FlagDirective("s")


def with_ttl() -> FlagDirective:
    """t: return item TTL remaining in seconds (mg, ma)."""
    return FlagDirective("t")


def with_no_bump() -> FlagDirective:
    """u: don't bump the item in the LRU (mg)."""
    return FlagDirective("u")


def with_value() -> FlagDirective:
    """v: return item value in <data block> (mg, ma)."""
    return FlagDirective("v")


def with_set_invalid() -> FlagDirective:
    """I: invalidate.

    ms: set-to-invalid if supplied CAS is older than item's CAS.
    md: mark as stale, bumps CAS.
    """
    return FlagDirective("I")


# ---- flags carrying an argument ----


def with_opaque(token: str) -> FlagDirective:
    """O(token): opaque value, consumed and copied back with the response (all commands)."""
    return FlagDirective("O", _text_token(token, "opaque token"))


def with_vivify(ttl: int) -> FlagDirective:
    """N(token): vivify on miss, takes TTL as an argument (mg, ma)."""
    return FlagDirective("N", _uint64(ttl, "vivify ttl"))


def with_recache(ttl: int) -> FlagDirective:
    """R(token): if token is less than remaining TTL win for recache (mg)."""
    return FlagDirective("R", _uint64(ttl, "recache ttl"))


def with_set_ttl(ttl: int) -> FlagDirective:
    """T(token): update remaining TTL (mg, ms, md, ma)."""
    return FlagDirective("T", _uint64(ttl, "ttl"))


def with_compare_cas(cas: int) -> FlagDirective:
    """C(token): compare CAS value when storing item (ms, md, ma). Signed 64-bit."""
    return FlagDirective("C", _format_int(cas, lo=INT64_MIN, hi=INT64_MAX, what="cas"))


def with_set_flag(flags: int) -> FlagDirective:
    """F(token): set client flags to token, 32 bit unsigned (ms)."""
    return FlagDirective("F", _format_int(flags, lo=0, hi=UINT32_MAX, what="client flags"))


def with_mode(token: str) -> FlagDirective:
    """M(token): mode switch (ms: E/A/P/R/S, ma: I/+/D/-)."""
    return FlagDirective("M", _text_token(token, "mode"))


def with_initial_value(value: int) -> FlagDirective:
    """J(token): initial value to use if auto created after miss, default 0 (ma)."""
    return FlagDirective("J", _uint64(value, "initial value"))


def with_delta(delta: int) -> FlagDirective:
    """D(token): delta to apply, unsigned 64-bit, default 1 (ma)."""
    return FlagDirective("D", _uint64(delta, "delta"))
