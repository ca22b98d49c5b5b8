"""Tests for the document-style account store."""

import pytest

from pogo_accounts.core.errors import DuplicateEmailError
from pogo_accounts.services.store import AccountStore


@pytest.fixture
def store(session):
    return AccountStore(session)


def test_insert_and_find_one(store, full_payload):
    account_id = store.insert_one(full_payload)
    assert len(account_id) == 24

    document = store.find_one(id=account_id)
    assert document == {"id": account_id, **full_payload}
    assert store.find_one(email=full_payload["email"])["id"] == account_id


def test_find_one_missing(store):
    assert store.find_one(id="0" * 24) is None
    assert store.find_one(email="nobody@example.com") is None


def test_unset_optional_fields_are_omitted(store, account_payload):
    account_id = store.insert_one(account_payload)
    assert set(store.find_one(id=account_id)) == {"id", "username", "email", "team"}


def test_find_respects_limit(store):
    for n in range(5):
        store.insert_one({"username": f"u{n}", "email": f"u{n}@example.com", "team": "valor"})
    assert len(store.find()) == 5
    assert len(store.find(limit=3)) == 3


def test_unique_email_index_backs_the_precheck(store, account_payload):
    store.insert_one(account_payload)
    with pytest.raises(DuplicateEmailError):
        store.insert_one({**account_payload, "username": "other"})
    assert len(store.find()) == 1


def test_update_one_partial(store, full_payload):
    account_id = store.insert_one(full_payload)

    result = store.update_one(account_id, {"level": 41})
    assert (result.matched_count, result.modified_count) == (1, 1)

    document = store.find_one(id=account_id)
    assert document["level"] == 41
    assert document["country"] == full_payload["country"]
    assert document["updatedAt"].endswith("Z")


def test_update_one_unchanged(store, full_payload):
    account_id = store.insert_one(full_payload)
    result = store.update_one(account_id, full_payload)
    assert (result.matched_count, result.modified_count) == (1, 0)
    assert "updatedAt" not in store.find_one(id=account_id)


def test_update_one_no_match(store):
    result = store.update_one("0" * 24, {"level": 3})
    assert (result.matched_count, result.modified_count) == (0, 0)


def test_update_one_duplicate_email(store, account_payload, full_payload):
    store.insert_one(account_payload)
    other_id = store.insert_one(full_payload)
    with pytest.raises(DuplicateEmailError):
        store.update_one(other_id, {"email": account_payload["email"]})


def test_find_one_and_delete(store, account_payload):
    account_id = store.insert_one(account_payload)
    deleted = store.find_one_and_delete(account_id)
    assert deleted["id"] == account_id
    assert store.find_one(id=account_id) is None
    assert store.find_one_and_delete(account_id) is None
