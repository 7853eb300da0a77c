"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, hash_cmd, init_cmd, state_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Aggregate repository documentation into one site content tree")

app.command(name="build")(build_cmd)
app.command(name="init")(init_cmd)
app.command(name="state")(state_cmd)
app.command(name="hash")(hash_cmd)
