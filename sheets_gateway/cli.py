"""Entry-point for the sheets-gateway CLI."""

import json
from enum import Enum
from typing import Any, Optional

import anyio
import typer
from rich.console import Console
from structlog import get_logger

from .auth.credentials import SCOPES
from .auth.exceptions import ConfigurationError
from .config import Settings, get_settings
from .gateway.catalogue import list_tools
from .gateway.service import ToolGateway
from .observability import configure_logging

app = typer.Typer(help="Expose Google Sheets operations as MCP tools.")
# Human-facing output goes to stderr; stdout is reserved for protocol traffic.
console = Console(stderr=True)
logger = get_logger(__name__)


class Transport(str, Enum):
    stdio = "stdio"
    http = "http"


def _apply_overrides(settings: Settings, overrides: dict[str, Any]) -> Settings:
    update = {key: value for key, value in overrides.items() if value is not None}
    if not update:
        return settings
    return settings.model_copy(update=update)


@app.command()
def serve(
    transport: Transport = typer.Option(Transport.stdio, help="Channel to serve on."),
    host: Optional[str] = typer.Option(None, help="Bind address for the HTTP transport."),
    port: Optional[int] = typer.Option(None, help="Port for the HTTP transport."),
    api_key: Optional[str] = typer.Option(None, help="Google API key."),
    credentials_file: Optional[str] = typer.Option(None, help="Path to a service-account key file."),
    project_id: Optional[str] = typer.Option(None, help="Google Cloud project id."),
    log_level: Optional[str] = typer.Option(None, help="Minimum log level."),
) -> None:
    """Run the tool server until the channel closes."""

    settings = _apply_overrides(
        get_settings(),
        {
            "HTTP_HOST": host,
            "HTTP_PORT": port,
            "GOOGLE_API_KEY": api_key,
            "GOOGLE_APPLICATION_CREDENTIALS": credentials_file,
            "GOOGLE_CLOUD_PROJECT_ID": project_id,
            "LOG_LEVEL": log_level,
        },
    )
    configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)

    try:
        gateway = ToolGateway.from_settings(settings, transport=transport.value)
    except ConfigurationError as exc:
        console.print(f"[bold red]Configuration error:[/bold red] {exc.message}")
        raise typer.Exit(code=1) from exc

    logger.info("server_starting", transport=transport.value, auth_type=gateway.backend.auth_type)

    if transport is Transport.stdio:
        from .mcp_transport.stdio import serve_stdio

        anyio.run(serve_stdio, gateway, settings)
    else:
        import uvicorn

        from .main import create_app

        uvicorn.run(
            create_app(gateway=gateway, settings=settings, close_gateway=True),
            host=settings.HTTP_HOST,
            port=settings.HTTP_PORT,
            log_config=None,
        )


@app.command()
def tools() -> None:
    """Print the tool catalogue as JSON."""

    catalogue = [tool.model_dump() for tool in list_tools()]
    typer.echo(json.dumps(catalogue, indent=2))


@app.command("get-refresh-token")
def get_refresh_token(
    client_id: str = typer.Option(..., help="OAuth client id."),
    client_secret: str = typer.Option(..., help="OAuth client secret."),
    port: int = typer.Option(3000, help="Local port for the consent redirect."),
) -> None:
    """Run the OAuth consent flow in a browser and print the refresh token."""

    from google_auth_oauthlib.flow import InstalledAppFlow

    client_config = {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "redirect_uris": [f"http://localhost:{port}/"],
        }
    }
    flow = InstalledAppFlow.from_client_config(client_config, SCOPES)

    console.print("[bold green]Opening browser for authorization...[/bold green]")
    credentials = flow.run_local_server(port=port, access_type="offline", prompt="consent")

    if not credentials.refresh_token:
        console.print(
            "[bold red]Error:[/bold red] no refresh token returned. "
            "Revoke the app's access and try again."
        )
        raise typer.Exit(code=1)

    console.print("[bold green]Authorization complete.[/bold green] Add this to your .env file:")
    typer.echo(f"refresh_token={credentials.refresh_token}")


if __name__ == "__main__":  # pragma: no cover
    app()
