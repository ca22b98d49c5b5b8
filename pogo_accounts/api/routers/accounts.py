"""Pokemon GO account CRUD endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Response
from sqlmodel import Session

from ...core import get_session, is_valid_object_id
from ...core.errors import DuplicateEmailError, MalformedIdError, NotFoundError
from ...services import AccountStore, sanitize_account

logger = logging.getLogger(__name__)

PREFIX = "/pogo-accounts"

router = APIRouter(prefix=PREFIX, tags=["pogo-accounts"])


def get_store(session: Session = Depends(get_session)) -> AccountStore:
    return AccountStore(session)


def _require_id(account_id: str) -> str:
    """Reject malformed ids before the store is touched.

    Hex digits are case-insensitive; stored ids are lowercase.
    """

    if not is_valid_object_id(account_id):
        raise MalformedIdError()
    return account_id.lower()


@router.get("")
def list_accounts(store: AccountStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """List up to 100 accounts."""

    return store.find()


@router.get("/{account_id}")
def get_account(account_id: str, store: AccountStore = Depends(get_store)) -> Dict[str, Any]:
    """Get a single account by id."""

    account_id = _require_id(account_id)
    account = store.find_one(id=account_id)
    if account is None:
        raise NotFoundError()
    return account


@router.post("", status_code=201)
def create_account(
    body: Any = Body(None),
    store: AccountStore = Depends(get_store),
) -> Dict[str, Any]:
    """Validate and insert a new account."""

    account = sanitize_account(body)

    if store.find_one(email=account["email"]) is not None:
        raise DuplicateEmailError()

    account_id = store.insert_one(account)
    logger.info("Created account %s", account_id)
    return {"message": "Account created successfully", "id": account_id}


@router.put("/{account_id}")
def update_account(
    account_id: str,
    body: Any = Body(None),
    store: AccountStore = Depends(get_store),
):
    """Replace the supplied fields of an existing account."""

    account_id = _require_id(account_id)
    changes = sanitize_account(body)

    result = store.update_one(account_id, changes)
    if not result.matched_count:
        raise NotFoundError()
    if not result.modified_count:
        return Response(status_code=304)

    logger.info("Updated account %s", account_id)
    return {"message": "Account updated successfully", "username": changes["username"]}


@router.delete("/{account_id}")
def delete_account(account_id: str, store: AccountStore = Depends(get_store)) -> Dict[str, Any]:
    """Delete an account by id."""

    account_id = _require_id(account_id)
    deleted = store.find_one_and_delete(account_id)
    if deleted is None:
        raise NotFoundError()

    logger.info("Deleted account %s", account_id)
    return {"message": "Account deleted successfully", "deletedId": account_id}


__all__ = ["router"]
