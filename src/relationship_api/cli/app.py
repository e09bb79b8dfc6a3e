"""Typer CLI root application with serve command."""

import typer

from relationship_api.core.config import get_settings
from relationship_api.core.logging import setup_logging

app = typer.Typer(name="relationship-api", help="Partner relationship management CLI")


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),  # noqa: FBT001
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),  # noqa: S104
    port: int = typer.Option(8000, "--port", help="Bind port"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run(
        "relationship_api.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
    )


def _register_subcommands() -> None:
    """Register all CLI subcommand groups."""
    from relationship_api.cli.db_cmd import db_app
    from relationship_api.cli.geocode_cmd import geocode_app
    from relationship_api.cli.geography_cmd import geography_app

    app.add_typer(db_app, name="db", help="Database migration commands")
    app.add_typer(geocode_app, name="geocode", help="Geocoding and county assignment commands")
    app.add_typer(geography_app, name="geography", help="Geography reference commands")


_register_subcommands()
