"""Geocoding CLI commands: county backfill and one-off lookups."""

import asyncio

import typer

geocode_app = typer.Typer()


@geocode_app.command("backfill")
def backfill(
    delay: float | None = typer.Option(
        None, "--delay", min=0, help="Seconds to pause between provider calls (floored at the provider rate limit)"
    ),
    organizations_only: bool = typer.Option(False, "--organizations-only", help="Skip people"),  # noqa: FBT001
) -> None:
    """Assign counties to every organization and person with a city but no county."""
    kinds = ["organization"] if organizations_only else ["organization", "person"]
    asyncio.run(_backfill(kinds, delay))


@geocode_app.command("resolve")
def resolve(
    city: str = typer.Argument(..., help="City name"),
    state: str = typer.Argument(..., help="State name or two-letter code"),
) -> None:
    """Resolve a city and state to coordinates."""
    asyncio.run(_resolve(city, state))


@geocode_app.command("address")
def address(
    value: str = typer.Argument(..., metavar="ADDRESS", help="Full street address"),
) -> None:
    """Geocode a full address and show the provider's county breakdown."""
    asyncio.run(_address(value))


async def _backfill(kinds: list[str], delay: float | None) -> None:
    """Async implementation of the county backfill."""
    from relationship_api.core.config import get_settings
    from relationship_api.core.database import dispose_engine, get_session_factory, init_engine
    from relationship_api.core.dependencies import build_app_services

    settings = get_settings()
    init_engine(settings.database_url)

    try:
        factory = get_session_factory()
        services = build_app_services(settings, factory)
        async with factory() as session:
            summary = await services.assigner.backfill(session, kinds, delay)

        typer.echo("\nCounty backfill completed:")
        typer.echo(f"  Processed:  {summary.processed}")
        typer.echo(f"  Succeeded:  {summary.succeeded}")
        typer.echo(f"  Failed:     {len(summary.failed)}")
        for label in summary.failed:
            typer.echo(f"    - {label}")
        await services.task_runner.shutdown()
    finally:
        await dispose_engine()


async def _resolve(city: str, state: str) -> None:
    """Async implementation of a single city/state lookup."""
    from relationship_api.core.config import get_settings
    from relationship_api.core.dependencies import build_app_services

    services = build_app_services(get_settings())
    coordinate = await services.resolver.resolve(city, state)
    if coordinate is None:
        typer.echo(f"Could not resolve {city}, {state}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"{city}, {state}: {coordinate.latitude}, {coordinate.longitude}")
    if coordinate.display_name:
        typer.echo(f"  {coordinate.display_name}")


async def _address(value: str) -> None:
    """Async implementation of a single address lookup."""
    from relationship_api.core.config import get_settings
    from relationship_api.core.dependencies import build_app_services

    services = build_app_services(get_settings())
    resolution = await services.resolver.resolve_address(value)
    if resolution is None:
        typer.echo("Address could not be geocoded", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Provider:  {resolution.provider}")
    typer.echo(f"Lat/Lon:   {resolution.coordinate.latitude}, {resolution.coordinate.longitude}")
    typer.echo(f"City:      {resolution.city or '-'}")
    typer.echo(f"County:    {resolution.county or '-'}")
    typer.echo(f"State:     {resolution.state or '-'}")
