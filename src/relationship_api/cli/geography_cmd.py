"""Geography reference CLI commands."""

import asyncio
from pathlib import Path

import typer

geography_app = typer.Typer()


@geography_app.command("import")
def import_geography(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="County hierarchy CSV export"),  # noqa: B008
) -> None:
    """Import (upsert by GeoID) county hierarchy rows from a CSV export."""
    asyncio.run(_import_geography(csv_path))


async def _import_geography(csv_path: Path) -> None:
    """Async implementation of the geography import."""
    from relationship_api.core.config import get_settings
    from relationship_api.core.database import dispose_engine, get_session_factory, init_engine
    from relationship_api.services.geography_service import import_geography_units, load_geography_csv

    records = load_geography_csv(csv_path)
    typer.echo(f"Parsed {len(records)} geography records from {csv_path}")

    settings = get_settings()
    init_engine(settings.database_url)

    try:
        factory = get_session_factory()
        async with factory() as session:
            count = await import_geography_units(session, records)
        typer.echo(f"Upserted {count} geography units")
    finally:
        await dispose_engine()
