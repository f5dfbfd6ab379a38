"""
Datas em UTC.

SQLite devolve datetimes sem fuso mesmo em colunas timezone=True;
comparações em Python passam por `as_utc`.
"""
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Anexa UTC a datetimes ingênuos; converte os demais para UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
