from __future__ import annotations
from typing import Optional, Any
import datetime as dt
from fastapi import HTTPException


# ---------- Errors ----------
class InvalidIdentifier(HTTPException):
    def __init__(self, what: str = "resource") -> None:
        super().__init__(status_code=400, detail=f"Invalid {what} ID")


class NotFound(HTTPException):
    def __init__(self, what: str = "resource") -> None:
        super().__init__(status_code=404, detail=f"{what} not found")


class Conflict(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=409, detail=detail)


class TransactionFailure(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status_code=500, detail=detail)


# ---------- Helpers ----------
def ensure_owner(obj: Any, user_id: int, what: str = "resource") -> None:
    if not obj or getattr(obj, "user_id", None) != user_id:
        raise NotFound(what)


def parse_id(raw: str, what: str = "resource") -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise InvalidIdentifier(what)


def normalize_whitespace(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    compact = " ".join(value.strip().split())
    return compact or None


def now_utc() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def seconds_between(start: dt.datetime, end: dt.datetime) -> int:
    # SQLite hands timestamptz columns back naive, so compare in naive UTC
    if start.tzinfo is not None:
        start = start.astimezone(dt.timezone.utc).replace(tzinfo=None)
    if end.tzinfo is not None:
        end = end.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return max(0, int((end - start).total_seconds()))
