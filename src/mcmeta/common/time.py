from __future__ import annotations

import datetime


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(tz=datetime.timezone.utc)


def utc_now_iso() -> str:
    return utc_now().isoformat()


def run_id_for(now: datetime.datetime) -> str:
    """Directory-safe run id, e.g. 2026-10-18T20-06-00-123456Z."""
    return now.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%fZ")
