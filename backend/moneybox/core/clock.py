import time
from datetime import datetime, timezone


def utcnow_iso() -> str:
    """UTC timestamp in the ``2025-08-31T10:00:00.000Z`` form the frontend expects."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_ms() -> int:
    return time.time_ns() // 1_000_000


def iso_from_epoch_ms(value: int) -> str:
    ts = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    return ts.isoformat(timespec="milliseconds").replace("+00:00", "Z")
