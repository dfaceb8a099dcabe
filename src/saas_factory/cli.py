"""Command line entry point."""

import asyncio

from rich.console import Console
import typer
import uvicorn

from .config import get_settings
from .database import create_tables, dispose_engine

app = typer.Typer(
    name="saas-factory",
    help="SaaS Factory API service",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Interface to bind"),
    port: int = typer.Option(8000, help="Port to listen on"),
    reload: bool = typer.Option(False, help="Reload on code changes"),
):
    """Run the API server."""
    settings = get_settings()
    mode = "demo" if settings.demo_mode else "live"
    console.print(f"[bold green]Starting SaaS Factory[/bold green] ({mode} mode) on {host}:{port}")
    uvicorn.run("saas_factory.main:app", host=host, port=port, reload=reload, log_config=None)


@app.command("init-db")
def init_db():
    """Create database tables that do not exist yet."""

    async def _run() -> None:
        try:
            await create_tables()
        finally:
            await dispose_engine()

    asyncio.run(_run())
    console.print("[green]Database tables are ready.[/green]")


if __name__ == "__main__":
    app()
