from leaksweep.cli import app

app()
