"""
cli.py — Click CLI entrypoint for the pool CRM.

Usage:
    poolcrm serve
    poolcrm send-reminders
    poolcrm scrape-pool-specs --force
"""

from __future__ import annotations

import asyncio

import click
import structlog

from poolcrm_shared.config import settings
from poolcrm_shared.logging import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
def main(log_level: str) -> None:
    """Pool CRM server and background jobs."""
    configure_logging(log_level=log_level)


@main.command()
@click.option("--host", default=settings.api_host, show_default=True)
@click.option("--port", default=settings.api_port, type=int, show_default=True)
@click.option("--reload", is_flag=True, help="Reload on code changes (development).")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API."""
    import uvicorn

    log.info("server_starting", host=host, port=port)
    uvicorn.run("poolcrm_api.app:app", host=host, port=port, reload=reload)


@main.command("send-reminders")
def send_reminders() -> None:
    """Email 24h and 2h appointment reminders that are due now."""
    from poolcrm_shared.db import get_supabase_client

    from poolcrm_api.notifications.email import ResendEmailProvider
    from poolcrm_api.notifications.reminders import ReminderService

    provider = ResendEmailProvider()
    if not provider.enabled:
        raise click.ClickException("RESEND_API_KEY is not set; no reminders sent.")

    service = ReminderService(get_supabase_client(service_role=True), provider)
    summary = asyncio.run(service.send_due_reminders())

    for window, counts in summary.items():
        click.echo(
            f"  {window:4s} sent={counts['sent']} "
            f"skipped={counts['skipped']} failed={counts['failed']}"
        )


@main.command("scrape-pool-specs")
@click.option("--force", is_flag=True, help="Ignore the cache file and re-scrape every model.")
def scrape_pool_specs(force: bool) -> None:
    """Refresh the pool spec catalogue."""
    from poolcrm_api.services.pool_specs_service import PoolSpecsScraper

    result = asyncio.run(PoolSpecsScraper().get_specs(force=force))
    data = result["data"]
    found = sum(1 for specs in data.values() if specs)
    source = "cache" if result["fromCache"] else "site"
    click.echo(f"{result['message']} ({found}/{len(data)} models, from {source})")


if __name__ == "__main__":
    main()
