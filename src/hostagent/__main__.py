from hostagent.apps.cli.app import app

app()
