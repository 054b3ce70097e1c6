"""DataSync CLI - run sync jobs and work with payload signatures."""

import asyncio
import json
import logging
import uuid

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import settings
from .security.signing import sign, verify

app = typer.Typer(
    name="datasync",
    help="Content syndication - run sync jobs and inspect their results",
    no_args_is_help=True,
)
console = Console()

STATUS_STYLES = {
    "queued": "dim",
    "running": "cyan",
    "success": "green",
    "partial": "yellow",
    "failed": "red",
}


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _parse_json(raw: str) -> object:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        console.print(f"[red]Invalid JSON payload:[/red] {exc}")
        raise typer.Exit(2)


def _parse_uuid(raw: str, what: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        console.print(f"[red]Invalid {what}:[/red] {raw}")
        raise typer.Exit(2)


def _build_deliverer(mode: str | None):
    from .services import sync_svc

    try:
        return sync_svc.build_deliverer(mode)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2)


def _print_outcome(outcome) -> None:
    style = STATUS_STYLES.get(outcome.status, "white")
    table = Table(title=f"Sync job {outcome.job_id}")
    table.add_column("Site", style="cyan")
    table.add_column("Result")
    table.add_column("Items", justify="right")
    table.add_column("Duration", justify="right")
    table.add_column("Error", style="red")
    for site in outcome.sites:
        table.add_row(
            str(site.site_id),
            "[green]success[/green]" if site.success else "[red]failed[/red]",
            str(site.item_count),
            f"{site.duration_ms} ms",
            site.error or "",
        )
    console.print(table)
    console.print(f"Status: [{style}]{outcome.status}[/{style}]")
    if outcome.error:
        console.print(f"[red]{outcome.error}[/red]")


async def _ensure_tables() -> None:
    from .database import engine
    from .models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.command("serve")
def serve(
    port: int = typer.Option(8030, "--port", "-p", help="Port to run on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Launch the DataSync API and destination receiver."""
    import uvicorn

    console.print(f"[bold cyan]Starting DataSync at http://{host}:{port}[/bold cyan]")
    uvicorn.run("datasync.app:app", host=host, port=port, reload=reload)


@app.command("run-job")
def run_job(
    job_id: str = typer.Argument(..., help="Sync job ID"),
    organization_id: str = typer.Argument(..., help="Organization ID"),
    delivery: str = typer.Option(None, "--delivery", help="Delivery mode: http or local"),
):
    """Execute one queued sync job in this process."""
    from .database import async_session_factory
    from .services import sync_svc

    jid = _parse_uuid(job_id, "job id")
    oid = _parse_uuid(organization_id, "organization id")
    deliverer = _build_deliverer(delivery)

    async def _run():
        await _ensure_tables()
        orchestrator = sync_svc.build_orchestrator(async_session_factory, deliverer=deliverer)
        return await orchestrator.execute(jid, oid)

    outcome = asyncio.run(_run())
    _print_outcome(outcome)
    if not outcome.success:
        raise typer.Exit(1)


@app.command("run-queued")
def run_queued(
    org_slug: str = typer.Argument(..., help="Organization slug"),
    delivery: str = typer.Option(None, "--delivery", help="Delivery mode: http or local"),
):
    """Execute every queued job for an organization, oldest first."""
    from .database import async_session_factory
    from .services import job_svc, organization_svc, sync_svc

    deliverer = _build_deliverer(delivery)

    async def _run():
        await _ensure_tables()
        async with async_session_factory() as db:
            org = await organization_svc.get_organization_by_slug(db, org_slug)
            if not org:
                return None
            jobs = await job_svc.list_queued_jobs(db, org.id)

        orchestrator = sync_svc.build_orchestrator(async_session_factory, deliverer=deliverer)
        outcomes = []
        for job in jobs:
            outcomes.append(await orchestrator.execute(job.id, org.id))
        return outcomes

    outcomes = asyncio.run(_run())
    if outcomes is None:
        console.print(f"[red]Organization '{org_slug}' not found[/red]")
        raise typer.Exit(1)
    if not outcomes:
        console.print("[dim]No queued jobs.[/dim]")
        return
    for outcome in outcomes:
        _print_outcome(outcome)


@app.command("jobs")
def list_jobs(
    org_slug: str = typer.Argument(..., help="Organization slug"),
    limit: int = typer.Option(10, "--limit", "-n"),
):
    """List recent sync jobs for an organization."""
    from .database import async_session_factory
    from .services import job_svc, organization_svc

    async def _load():
        await _ensure_tables()
        async with async_session_factory() as db:
            org = await organization_svc.get_organization_by_slug(db, org_slug)
            if not org:
                return None
            return await job_svc.list_jobs(db, org.id, limit=limit)

    jobs = asyncio.run(_load())
    if jobs is None:
        console.print(f"[red]Organization '{org_slug}' not found[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Sync jobs - {org_slug}")
    table.add_column("ID", style="cyan")
    table.add_column("Status")
    table.add_column("Trigger")
    table.add_column("Started")
    table.add_column("Completed")
    for job in jobs:
        style = STATUS_STYLES.get(job.status, "white")
        table.add_row(
            str(job.id),
            f"[{style}]{job.status}[/{style}]",
            job.trigger,
            job.started_at.isoformat() if job.started_at else "-",
            job.completed_at.isoformat() if job.completed_at else "-",
        )
    console.print(table)


@app.command("sign")
def sign_payload(
    payload: str = typer.Argument(..., help="Payload as a JSON string"),
    secret: str = typer.Option(..., "--secret", "-s", help="Destination secret"),
):
    """Print the HMAC-SHA256 signature for a payload."""
    typer.echo(sign(_parse_json(payload), secret))


@app.command("verify")
def verify_payload(
    payload: str = typer.Argument(..., help="Payload as a JSON string"),
    signature: str = typer.Argument(..., help="Hex signature to check"),
    secret: str = typer.Option(..., "--secret", "-s", help="Destination secret"),
):
    """Check a payload signature."""
    if verify(_parse_json(payload), secret, signature):
        console.print(Panel("[green]Signature valid[/green]", title="Verify"))
        return
    console.print(Panel("[red]Signature invalid[/red]", title="Verify"))
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
