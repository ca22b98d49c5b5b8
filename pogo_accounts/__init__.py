"""pogo_accounts: CRUD service and terminal client for Pokemon GO account records.

The API lives in ``pogo_accounts.app`` (requires ``DATABASE_URL``); the client
in ``pogo_accounts.client`` and ``pogo_accounts.cli`` needs no server config.
"""

__version__ = "1.0.0"
