from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from mcmeta.config import load_settings
from mcmeta.meta.errors import MetaFlagError
from mcmeta.meta.results import obtain_meta_flags_results
from mcmeta.reporting.logger import CodecEvent, open_run


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="mcmeta parse", description="Decode meta response flag tokens")
    p.add_argument("tokens", nargs="*", help="Response flag tokens, e.g. W h1 t30 c42")
    p.add_argument("--log", action="store_true", help="Record an event under MCMETA_EVENTS_DIR")
    p.add_argument("--log-dir", default="", help="Record an event under this directory")
    args = p.parse_args(argv)

    s = load_settings()
    err: Optional[MetaFlagError] = None
    try:
        data = obtain_meta_flags_results(args.tokens).to_dict()
    except MetaFlagError as e:
        err = e
        data = {}

    out = json.dumps(data, sort_keys=True) if err is None else ""

    if args.log or args.log_dir:
        run_id, logger = open_run(Path(args.log_dir) if args.log_dir else s.events_dir)
        logger.log(
            CodecEvent.make(
                run_id=run_id,
                operation="parse",
                input=" ".join(args.tokens),
                output=out,
                ok=err is None,
                error_code=err.code if err is not None else None,
                message=str(err) if err is not None else "",
                data=data,
            )
        )

    if err is not None:
        print(f"[mcmeta] {err.code}: {err}", file=sys.stderr)
        return 1
    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
