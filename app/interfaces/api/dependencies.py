"""FastAPI dependency utilities."""

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.application.registry import RouteRegistry
from app.application.use_cases.notifications import NotificationDispatcher
from app.container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """Return the services built for the running application."""

    return request.app.state.container


def get_db(container: ServiceContainer = Depends(get_container)) -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = container.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_dispatcher(container: ServiceContainer = Depends(get_container)) -> NotificationDispatcher:
    return container.dispatcher


def get_registry(container: ServiceContainer = Depends(get_container)) -> RouteRegistry:
    return container.registry
