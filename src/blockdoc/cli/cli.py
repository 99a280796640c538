"""CLI entrypoint: Typer app definition and command registration"""

import typer

from blockdoc.cli.commands import main_callback, render_cmd, schema_cmd, validate_cmd


app = typer.Typer(name="blockdoc", no_args_is_help=True, help="Validate and render BlockDoc JSON documents")

app.callback()(main_callback)
app.command(name="render")(render_cmd)
app.command(name="validate")(validate_cmd)
app.command(name="schema")(schema_cmd)
