from typegraph.cli.main import app

app(prog_name="typegraph")
