from pathlib import Path

import typer
from dotenv import set_key

from arango_graph.config import ConnectionSettings
from arango_graph.domain.exceptions import ArangoGraphError
from arango_graph.services.connection import HttpConnection

app = typer.Typer(add_completion=False)


def _test_connection(endpoint: str, user: str, password: str, database: str) -> bool:
    settings = ConnectionSettings(
        endpoint=endpoint,
        username=user or None,
        password=password,
        database=database or None,
    )
    try:
        with HttpConnection(settings) as connection:
            connection.get_json(connection.get("/_api/version"))
        return True
    except ArangoGraphError as e:
        typer.echo(f"Connection check failed: {e}", err=True)
        return False


@app.command()
def run() -> None:
    """Interactive setup wizard for the graph client connection."""
    defaults = ConnectionSettings()
    endpoint = typer.prompt("Server endpoint", default=defaults.endpoint)
    user = typer.prompt("User", default=defaults.username or "root")
    password = typer.prompt(
        "Password",
        default=defaults.password or "",
        hide_input=True,
    )
    database = typer.prompt("Database", default=defaults.database or "_system")

    typer.echo("Testing connection...")
    if not _test_connection(endpoint, user, password, database):
        typer.secho("Failed to connect with provided details", fg="red")
        raise typer.Exit(1)
    typer.secho("Connected successfully!", fg="green")

    env_path = Path(".env")
    env_path.touch(mode=0o600, exist_ok=True)
    set_key(str(env_path), "ARANGO_ENDPOINT", endpoint)
    set_key(str(env_path), "ARANGO_USERNAME", user)
    set_key(str(env_path), "ARANGO_PASSWORD", password)
    set_key(str(env_path), "ARANGO_DATABASE", database)
    env_path.chmod(0o600)
    typer.secho(f"Credentials saved to {env_path}", fg="green")
