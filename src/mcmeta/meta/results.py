from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Iterable, Optional

from mcmeta.meta.errors import MalformedNumericArgumentError, MetaFlagError, UnknownFlagError
from mcmeta.meta.flags import INT64_MAX, INT64_MIN, UINT32_MAX, UINT64_MAX, parse_decimal


@dataclass
class MetaResult:
    """Typed view of the flags returned on one meta response line."""

    won: bool = False
    stale: bool = False
    key: str = ""
    opaque: str = ""
    cas_token: Optional[int] = None
    flags: int = 0
    hit: bool = False
    last_access: int = 0
    size: int = 0
    ttl: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _parse_int(flag: str, v: str, *, signed: bool, lo: int, hi: int) -> int:
    try:
        n = parse_decimal(v, signed=signed)
    except ValueError:
        raise MalformedNumericArgumentError(flag, v, "not a base-10 integer") from None
    if n < lo or n > hi:
        raise MalformedNumericArgumentError(flag, v, "out of range")
    return n


def _uint64(flag: str, v: str) -> int:
    return _parse_int(flag, v, signed=False, lo=0, hi=UINT64_MAX)


def _won(mr: MetaResult, v: str) -> None:
    mr.won = True


def _lost(mr: MetaResult, v: str) -> None:
    mr.won = False


def _stale(mr: MetaResult, v: str) -> None:
    mr.stale = True


def _key(mr: MetaResult, v: str) -> None:
    mr.key = v


def _opaque(mr: MetaResult, v: str) -> None:
    mr.opaque = v


def _cas(mr: MetaResult, v: str) -> None:
    # presence is recorded only once the value parsed
    mr.cas_token = _parse_int("c", v, signed=True, lo=INT64_MIN, hi=INT64_MAX)


def _flags(mr: MetaResult, v: str) -> None:
    mr.flags = _parse_int("f", v, signed=False, lo=0, hi=UINT32_MAX)


def _hit(mr: MetaResult, v: str) -> None:
    if not v:
        raise MalformedNumericArgumentError("h", v, "missing argument")
    mr.hit = v[0] == "1"


def _last_access(mr: MetaResult, v: str) -> None:
    mr.last_access = _uint64("l", v)


def _size(mr: MetaResult, v: str) -> None:
    mr.size = _uint64("s", v)


def _ttl(mr: MetaResult, v: str) -> None:
    mr.ttl = _uint64("t", v)


_DECODERS: Dict[str, Callable[[MetaResult, str], None]] = {
    "W": _won,
    "Z": _lost,
    "X": _stale,
    "k": _key,
    "O": _opaque,
    "c": _cas,
    "f": _flags,
    "h": _hit,
    "l": _last_access,
    "s": _size,
    "t": _ttl,
}


def obtain_meta_flags_results(tokens: Iterable[str]) -> MetaResult:
    """Decode response flag tokens into a MetaResult.

    Tokens are processed left to right; a repeated key overwrites the earlier
    value. The first malformed or unknown token raises a MetaFlagError whose
    ``partial`` holds whatever had been decoded before it.
    """
    mr = MetaResult()
    for tok in tokens:
        k, v = tok[:1], tok[1:]
        decode = _DECODERS.get(k)
        try:
            if decode is None:
                raise UnknownFlagError(k)
            decode(mr, v)
        except MetaFlagError as e:
            e.partial = mr
            raise
    return mr
