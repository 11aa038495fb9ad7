"""Per-user route preference endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.application.registry import RouteRegistry
from app.application.use_cases import list_route_preferences, update_route_preferences
from app.application.use_cases.preferences import RoutePreferenceView
from app.domain.errors import NotificationServiceError
from app.interfaces.api.dependencies import get_db, get_registry
from app.interfaces.api.routes_helpers import to_http_exception
from app.interfaces.api.schemas import RoutePreferenceRead, RoutePreferencesUpdate

router = APIRouter(prefix="/users/{user_id}/route-preferences", tags=["preferences"])


def _to_schema(view: RoutePreferenceView) -> RoutePreferenceRead:
    return RoutePreferenceRead(
        route=view.route,
        display_name=view.display_name,
        object_kind=view.object_kind,
        enabled=view.enabled,
    )


@router.get("", response_model=list[RoutePreferenceRead])
def read_preferences(
    user_id: UUID,
    db: Session = Depends(get_db),
    registry: RouteRegistry = Depends(get_registry),
) -> list[RoutePreferenceRead]:
    """Every registered route with the user's choice; routes default to enabled."""

    return [_to_schema(view) for view in list_route_preferences(db, registry, user_id)]


@router.put("", response_model=list[RoutePreferenceRead])
def replace_preferences(
    user_id: UUID,
    payload: RoutePreferencesUpdate,
    db: Session = Depends(get_db),
    registry: RouteRegistry = Depends(get_registry),
) -> list[RoutePreferenceRead]:
    try:
        views = update_route_preferences(db, registry, user_id, payload.as_mapping())
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return [_to_schema(view) for view in views]
