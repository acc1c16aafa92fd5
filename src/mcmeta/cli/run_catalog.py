from __future__ import annotations

from typing import List, Optional

from mcmeta.config import load_settings
from mcmeta.meta.catalog import load_catalog


def main(argv: Optional[List[str]] = None) -> int:
    s = load_settings()
    catalog = load_catalog(s.catalog_path)
    for name in sorted(catalog.commands):
        rule = catalog.commands[name]
        line = f"{name:<3} {' '.join(sorted(rule.flags))}"
        if rule.modes:
            line += f"  modes: {' '.join(sorted(rule.modes))}"
        if rule.description:
            line += f"  # {rule.description}"
        print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
