"""Document-style access to the account table.

The router talks to the database only through ``AccountStore``, whose
methods mirror the document operations the API needs: ``find``,
``find_one``, ``insert_one``, ``update_one`` and ``find_one_and_delete``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ..core import LIST_LIMIT, isoformat_z, utcnow
from ..core.errors import DuplicateEmailError, StoreError
from ..models import PogoAccount

logger = logging.getLogger(__name__)

# Public document keys mapped to column names.
_DOCUMENT_FIELDS: Dict[str, str] = {
    "username": "username",
    "email": "email",
    "team": "team",
    "country": "country",
    "birthday": "birthday",
    "level": "level",
}


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int


def account_to_dict(account: PogoAccount) -> Dict[str, Any]:
    """Serialise an account row to its JSON document, omitting unset fields."""

    document: Dict[str, Any] = {"id": account.id}
    for key, column in _DOCUMENT_FIELDS.items():
        value = getattr(account, column)
        if value is not None:
            document[key] = value
    if account.updated_at is not None:
        document["updatedAt"] = isoformat_z(account.updated_at)
    return document


class AccountStore:
    """Account collection bound to one database session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, limit: int = LIST_LIMIT) -> List[Dict[str, Any]]:
        try:
            rows = self.session.exec(
                select(PogoAccount).order_by(PogoAccount.id).limit(limit)
            ).all()
        except SQLAlchemyError as exc:
            raise self._failure("find", exc) from exc
        return [account_to_dict(row) for row in rows]

    def find_one(
        self, *, id: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        account = self._lookup(id=id, email=email)
        return account_to_dict(account) if account else None

    def insert_one(self, document: Mapping[str, Any]) -> str:
        """Insert a sanitized document and return its new identifier."""

        account = PogoAccount(**self._columns(document))
        self.session.add(account)
        self._commit("insert_one")
        self.session.refresh(account)
        return account.id

    def update_one(self, id: str, changes: Mapping[str, Any]) -> UpdateResult:
        """Replace the given fields and refresh ``updated_at``.

        Fields absent from ``changes`` keep their stored value. When every
        given field already holds the requested value nothing is written and
        ``modified_count`` is 0.
        """

        account = self._lookup(id=id)
        if account is None:
            return UpdateResult(matched_count=0, modified_count=0)

        columns = self._columns(changes)
        if all(getattr(account, name) == value for name, value in columns.items()):
            return UpdateResult(matched_count=1, modified_count=0)

        for name, value in columns.items():
            setattr(account, name, value)
        account.updated_at = utcnow()
        self.session.add(account)
        self._commit("update_one")
        return UpdateResult(matched_count=1, modified_count=1)

    def find_one_and_delete(self, id: str) -> Optional[Dict[str, Any]]:
        account = self._lookup(id=id)
        if account is None:
            return None
        document = account_to_dict(account)
        self.session.delete(account)
        self._commit("find_one_and_delete")
        return document

    # helpers ---------------------------------------------------------------

    def _lookup(
        self, *, id: Optional[str] = None, email: Optional[str] = None
    ) -> Optional[PogoAccount]:
        query = select(PogoAccount)
        if id is not None:
            query = query.where(PogoAccount.id == id)
        if email is not None:
            query = query.where(PogoAccount.email == email)
        try:
            return self.session.exec(query).first()
        except SQLAlchemyError as exc:
            raise self._failure("find_one", exc) from exc

    @staticmethod
    def _columns(document: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            column: document[key]
            for key, column in _DOCUMENT_FIELDS.items()
            if key in document
        }

    def _commit(self, operation: str) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.info("%s rejected by unique email index", operation)
            raise DuplicateEmailError() from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise self._failure(operation, exc) from exc

    @staticmethod
    def _failure(operation: str, exc: Exception) -> StoreError:
        logger.error("Store %s failed: %s", operation, exc)
        return StoreError(f"{operation} failed")


__all__ = ["AccountStore", "UpdateResult", "account_to_dict"]
