"""
API routes.
"""

from fastapi import FastAPI, Request

from web_test_recorder.context import AppContext


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the application's component graph."""
    return request.app.state.context


def register_routes(app: FastAPI) -> None:
    """
    Register API routes with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    from web_test_recorder.server.routes import ai, record, tests

    app.include_router(record.router, prefix="/api/record", tags=["record"])
    app.include_router(tests.router, prefix="/api", tags=["tests"])
    app.include_router(ai.router, prefix="/api/ai", tags=["ai"])

    @app.get("/api/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        context = get_context(request)
        return {
            "status": "ok",
            "message": "Backend is running",
            "active_sessions": len(context.registry),
            "ai_configured": context.gateway.is_configured,
        }
