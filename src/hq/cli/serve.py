"""
HQ CLI - Serve command.

Run the HTTP handler that aggregates and serves the dashboard document.
"""

import typer
from rich.console import Console

from hq.cli.common import get_config

console = Console()


def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
) -> None:
    """
    Serve the aggregated document over HTTP.

    Every GET request triggers a fresh GitHub aggregation.

    Example:
        hq serve --port 8080
    """
    import uvicorn

    from hq.core.api import create_app

    debug = (ctx.obj or {}).get("debug", False)
    app = create_app(get_config())

    console.print(f"[green]Serving dashboard data at http://{host}:{port}/[/green]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info" if debug else "warning")
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
        raise typer.Exit(0)
