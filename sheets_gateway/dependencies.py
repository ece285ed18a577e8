"""Global dependencies for the application."""

from fastapi import Request

from .gateway.service import ToolGateway


async def get_gateway(request: Request) -> ToolGateway:
    """Dependency to get the shared tool gateway.

    The gateway and its backend client are built in the main.py lifespan
    and shared across requests to enable connection pooling (keep-alive).

    Args:
        request: The FastAPI request object.

    Returns:
        The application's ToolGateway instance.
    """
    return request.app.state.gateway
