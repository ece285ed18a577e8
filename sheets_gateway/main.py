from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .auth.exceptions import SheetsGatewayError
from .config import Settings, get_settings
from .gateway.service import ToolGateway
from .mcp_transport.http import router as mcp_router


def create_app(
    gateway: ToolGateway | None = None,
    settings: Settings | None = None,
    close_gateway: bool = False,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        gateway: Pre-built gateway. When omitted, one is built from settings
            at startup and closed at shutdown.
        settings: Application settings.
        close_gateway: Close a pre-built gateway at shutdown, on the same
            event loop that served it.

    Returns:
        The FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = gateway is None or close_gateway
        app.state.gateway = gateway or ToolGateway.from_settings(settings, transport="http")

        try:
            yield
        finally:
            # Shutdown: close the backend HTTP client if this app owns it
            if owned:
                await app.state.gateway.aclose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )
    app.dependency_overrides[get_settings] = lambda: settings

    @app.exception_handler(SheetsGatewayError)
    async def gateway_exception_handler(request: Request, exc: SheetsGatewayError):
        return JSONResponse(
            status_code=500,
            content={"error": exc.code, "message": exc.message}
        )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}

    app.include_router(mcp_router)

    return app
