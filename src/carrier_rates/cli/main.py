from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional, Sequence

import httpx
import typer

from carrier_rates.core.config import Settings, get_settings
from carrier_rates.core.errors import CarrierError, ValidationError
from carrier_rates.core.logging import configure_logging, set_level
from carrier_rates.models import RateQuote
from carrier_rates.services import build_shipping_service

app = typer.Typer(add_completion=False, no_args_is_help=True)
logger = configure_logging(logger_name=__name__)


def _fmt_amount(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"{value:.2f}"


def _print_table(quotes: Sequence[RateQuote]) -> None:
    for quote in quotes:
        name = quote.service_name or "n/a"
        typer.echo(f"[{quote.carrier.value}] {quote.service_code} {name}")
        typer.echo(f"  total={_fmt_amount(quote.amount)} {quote.currency}")
        typer.echo(
            f"  base={_fmt_amount(quote.base_charge)} "
            f"transportation={_fmt_amount(quote.transportation_charge)}"
        )
        for alert in quote.alerts or []:
            typer.echo(f"  ! {alert}")


async def _fetch(settings: Settings, payload: dict) -> Sequence[RateQuote]:
    async with build_shipping_service(settings) as service:
        return await service.get_rates(payload)


@app.command()
def rates(
    request_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON rate request"),
    format: Optional[str] = typer.Option("table", help="table or json"),
) -> None:
    """Fetch rate quotes for the shipment described in REQUEST_FILE."""
    settings = get_settings()
    set_level(settings.log_level)

    try:
        payload = json.loads(request_file.read_text())
    except json.JSONDecodeError as exc:
        typer.echo(f"Could not parse {request_file}: {exc}", err=True)
        raise typer.Exit(code=2)

    if not settings.ups.is_configured():
        typer.echo("UPS credentials are not configured; see .env.example", err=True)
        raise typer.Exit(code=2)

    try:
        quotes = asyncio.run(_fetch(settings, payload))
    except ValidationError as exc:
        problems = exc.details.get("validation_errors", [])
        typer.echo(f"Invalid request in {request_file}: {len(problems)} problem(s)", err=True)
        for problem in problems:
            location = ".".join(str(part) for part in problem.get("loc", ()))
            typer.echo(f"  {location}: {problem.get('msg')}", err=True)
        raise typer.Exit(code=2)
    except CarrierError as exc:
        typer.echo(f"{exc} (retryable={exc.retryable})", err=True)
        raise typer.Exit(code=1)
    except httpx.HTTPError as exc:
        logger.error("Token request failed: %s", exc)
        typer.echo(f"Could not obtain a UPS access token: {exc}", err=True)
        raise typer.Exit(code=1)

    if format == "json":
        typer.echo(json.dumps([q.model_dump(mode="json") for q in quotes], indent=2))
        return

    _print_table(quotes)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
