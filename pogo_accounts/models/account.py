"""Database model for Pokemon GO account records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.ids import new_object_id


class Team(str, Enum):
    INSTINCT = "instinct"
    MYSTIC = "mystic"
    VALOR = "valor"


class PogoAccount(SQLModel, table=True):
    """Account document; fields hold already-sanitized values."""

    __tablename__ = "pogo_account"

    id: str = ORMField(
        default_factory=new_object_id,
        primary_key=True,
        min_length=24,
        max_length=24,
    )
    username: str = ORMField(max_length=50)
    email: str = ORMField(index=True, unique=True)
    team: str
    country: Optional[str] = None
    birthday: Optional[str] = None
    level: Optional[int] = None
    updated_at: Optional[datetime] = None


__all__ = ["PogoAccount", "Team"]
