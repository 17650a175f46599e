from gitshelf.cli.main import app

app(prog_name="gitshelf")
