from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from mcmeta.config import load_settings
from mcmeta.meta import flags as mf
from mcmeta.meta.catalog import CatalogViolation, check_directives, load_catalog
from mcmeta.meta.errors import E_BAD_DIRECTIVE, E_NO_COMMAND
from mcmeta.meta.flags import FlagDirective, build_meta_flags, parse_decimal
from mcmeta.reporting.logger import CodecEvent, open_run

_NO_ARG: Dict[str, Callable[[], FlagDirective]] = {
    "b": mf.with_binary,
    "c": mf.with_cas,
    "f": mf.with_flag,
    "h": mf.with_hit,
    "l": mf.with_last_access,
    "q": mf.with_quiet,
    "s": mf.with_size,
    "t": mf.with_ttl,
    "u": mf.with_no_bump,
    "v": mf.with_value,
    "I": mf.with_set_invalid,
}

_INT_ARG: Dict[str, Callable[[int], FlagDirective]] = {
    "N": mf.with_vivify,
    "R": mf.with_recache,
    "T": mf.with_set_ttl,
    "C": mf.with_compare_cas,
    "F": mf.with_set_flag,
    "J": mf.with_initial_value,
    "D": mf.with_delta,
}

_STR_ARG: Dict[str, Callable[[str], FlagDirective]] = {
    "O": mf.with_opaque,
    "M": mf.with_mode,
}


def directive_from_token(token: str) -> FlagDirective:
    """Map a ``key[argument]`` token typed on the command line to its constructor."""
    k, v = token[:1], token[1:]
    if k in _NO_ARG:
        if v:
            raise ValueError(f"flag {k} takes no argument: {token}")
        return _NO_ARG[k]()
    if k in _INT_ARG:
        try:
            n = parse_decimal(v, signed=(k == "C"))
        except ValueError:
            raise ValueError(f"flag {k} needs an integer argument: {token}") from None
        return _INT_ARG[k](n)
    if k in _STR_ARG:
        return _STR_ARG[k](v)
    raise ValueError(f"unknown request flag: {token!r}")


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="mcmeta build", description="Build a meta request flag string")
    p.add_argument("tokens", nargs="*", help="Flag tokens, e.g. c t O123 T30")
    p.add_argument("--cmd", default="", help="Check flags against this meta command (mg/ms/md/ma)")
    p.add_argument("--log", action="store_true", help="Record an event under MCMETA_EVENTS_DIR")
    p.add_argument("--log-dir", default="", help="Record an event under this directory")
    args = p.parse_args(argv)

    s = load_settings()
    catalog = load_catalog(s.catalog_path) if (args.cmd or s.strict) else None
    code: Optional[str] = None
    out = ""
    try:
        directives = [directive_from_token(t) for t in args.tokens]
        if catalog is not None:
            if not args.cmd:
                raise CatalogViolation(E_NO_COMMAND, "strict mode requires --cmd")
            check_directives(catalog, args.cmd, directives)
        out = build_meta_flags(directives)
        message = ""
    except CatalogViolation as e:
        code, message = e.code, str(e)
    except (TypeError, ValueError) as e:
        code, message = E_BAD_DIRECTIVE, str(e)

    if args.log or args.log_dir:
        run_id, logger = open_run(Path(args.log_dir) if args.log_dir else s.events_dir)
        logger.log(
            CodecEvent.make(
                run_id=run_id,
                operation="build",
                command=args.cmd,
                input=" ".join(args.tokens),
                output=out,
                ok=code is None,
                error_code=code,
                message=message,
            )
        )

    if code is not None:
        print(f"[mcmeta] {code}: {message}", file=sys.stderr)
        return 1
    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
