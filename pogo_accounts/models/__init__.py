"""Database model exports."""

from .account import PogoAccount, Team

__all__ = [
    "PogoAccount",
    "Team",
]
