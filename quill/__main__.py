from quill.cli.app import app

app()
