"""Service layer helpers."""

from .sanitize import ACCOUNT_RULES, escape_text, sanitize_account
from .store import AccountStore, UpdateResult, account_to_dict

__all__ = [
    "ACCOUNT_RULES",
    "AccountStore",
    "UpdateResult",
    "account_to_dict",
    "escape_text",
    "sanitize_account",
]
