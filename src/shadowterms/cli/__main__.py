from shadowterms.cli.app import app

app()
