from fastapi import FastAPI

from . import actors, health, notifications, tasks


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(actors.router)
    app.include_router(tasks.router)
    app.include_router(notifications.router)
