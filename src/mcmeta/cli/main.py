from __future__ import annotations

import argparse
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> None:
    p = argparse.ArgumentParser(prog="mcmeta", description="memcached meta protocol flag codec")
    sub = p.add_subparsers(dest="subcommand", required=True)

    # build
    p_build = sub.add_parser("build", help="Build a request flag string from tokens")
    p_build.add_argument("tokens", nargs="*")
    p_build.add_argument("--cmd", default="", help="Check flags against mg/ms/md/ma")
    p_build.add_argument("--log", action="store_true")
    p_build.add_argument("--log-dir", default="")
    p_build.set_defaults(_entry="mcmeta.cli.run_build")

    # parse
    p_parse = sub.add_parser("parse", help="Decode response flag tokens to JSON")
    p_parse.add_argument("tokens", nargs="*")
    p_parse.add_argument("--log", action="store_true")
    p_parse.add_argument("--log-dir", default="")
    p_parse.set_defaults(_entry="mcmeta.cli.run_parse")

    # catalog
    p_cat = sub.add_parser("catalog", help="Show which flags each meta command accepts")
    p_cat.set_defaults(_entry="mcmeta.cli.run_catalog")

    args = p.parse_args(argv)

    if args._entry in ("mcmeta.cli.run_build", "mcmeta.cli.run_parse"):
        fwd: List[str] = []
        if args._entry == "mcmeta.cli.run_build":
            from mcmeta.cli.run_build import main as _m

            if args.cmd:
                fwd += ["--cmd", args.cmd]
        else:
            from mcmeta.cli.run_parse import main as _m
        if args.log:
            fwd.append("--log")
        if args.log_dir:
            fwd += ["--log-dir", args.log_dir]
        # "--" keeps tokens such as "C-7" away from option parsing
        raise SystemExit(_m(fwd + ["--", *args.tokens]))

    if args._entry == "mcmeta.cli.run_catalog":
        from mcmeta.cli.run_catalog import main as _m

        raise SystemExit(_m([]))

    raise SystemExit(2)
