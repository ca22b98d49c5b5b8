from pogo_accounts.cli import app

app()
