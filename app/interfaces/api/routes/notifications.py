"""Endpoints and websocket handler for route-driven notifications."""

from __future__ import annotations

import json
import logging
from typing import Any
from uuid import UUID

from anyio import to_thread
from fastapi import (
    APIRouter,
    Body,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from app.application.registry import RouteRegistry
from app.application.use_cases.notifications import (
    DispatchResult,
    NotificationDispatcher,
    get_notification,
    list_notifications_by_status,
    list_user_notifications,
    mark_notifications_read,
    search_notifications,
)
from app.container import ServiceContainer, parse_channels
from app.domain.entities import (
    MAX_PAGE_SIZE,
    Notification,
    NotificationRequest,
    Page,
    RouteConfiguration,
)
from app.domain.errors import NotificationServiceError, RouteNotFoundError
from app.infrastructure.database import session_scope
from app.infrastructure.notifications import serialize_notification
from app.interfaces.api.dependencies import (
    get_container,
    get_db,
    get_dispatcher,
    get_registry,
)
from app.interfaces.api.routes_helpers import to_http_exception
from app.interfaces.api.schemas import (
    BroadcastRequest,
    BroadcastResponse,
    ChannelDeliveryRead,
    NotificationDispatchResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationPageRead,
    NotificationRead,
    NotificationSearchRequest,
    ObjectKindRead,
    RouteRead,
    UserSummaryRead,
)

router = APIRouter(prefix="/notification", tags=["notifications"])
logger = logging.getLogger(__name__)

BACKLOG_SIZE = 100


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(
        id=notification.id,
        user_id=notification.recipient_id,
        route=notification.route,
        title=notification.title,
        message=notification.message,
        status=notification.status.value,
        deliveries=[
            ChannelDeliveryRead(
                channel=delivery.channel.value,
                status=delivery.status.value,
                error=delivery.error,
            )
            for delivery in notification.deliveries
        ],
        payload=notification.template_data or {},
        created_at=notification.created_at,
        read_at=notification.read_at,
    )


def _result_to_schema(result: DispatchResult) -> NotificationDispatchResponse:
    return NotificationDispatchResponse(
        id=result.id,
        title=result.title,
        message=result.message,
        route=result.route,
        created_at=result.created_at,
        recipients=[UserSummaryRead.model_validate(user) for user in result.recipients],
        created_notification_ids=result.created_ids,
    )


def _route_to_schema(configuration: RouteConfiguration) -> RouteRead:
    payload_type = configuration.payload_type
    return RouteRead(
        name=configuration.name,
        display_name=configuration.display_name,
        description=configuration.description,
        template_name=configuration.template_name,
        object_kind=ObjectKindRead(
            name=configuration.object_kind.name,
            display_name=configuration.object_kind.display_name,
        ),
        tags=sorted(configuration.tags),
        icon=configuration.icon,
        include_deputies=configuration.include_deputies,
        payload_schema=payload_type.model_json_schema(by_alias=True)
        if hasattr(payload_type, "model_json_schema")
        else {},
    )


def _split_channels(values: list[str] | None) -> list[str]:
    names: list[str] = []
    for value in values or []:
        names.extend(part for part in value.split(",") if part.strip())
    return names


def _page_to_schema(page: Page[Notification]) -> NotificationPageRead:
    return NotificationPageRead(
        items=[_notification_to_schema(notification) for notification in page.items],
        page=page.page,
        page_size=page.page_size,
        total_count=page.total_count,
        total_pages=page.total_pages,
    )


@router.get("/routes", response_model=list[RouteRead])
def list_routes(registry: RouteRegistry = Depends(get_registry)) -> list[RouteRead]:
    """Return the catalogue of routes producers can raise."""

    return [_route_to_schema(configuration) for configuration in registry.configurations()]


@router.get("/by-user/{user_id}", response_model=NotificationPageRead)
def list_notifications_for_user(
    user_id: UUID,
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    db: Session = Depends(get_db),
) -> NotificationPageRead:
    result = list_user_notifications(
        db, user_id, unread_only=unread_only, page=page, page_size=page_size
    )
    return _page_to_schema(result)


@router.post("/search", response_model=NotificationPageRead)
def search(
    payload: NotificationSearchRequest,
    db: Session = Depends(get_db),
) -> NotificationPageRead:
    """Filter notifications by any stored field, sorted and paged."""

    try:
        result = search_notifications(db, payload.to_query())
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _page_to_schema(result)


@router.get("/by-status/{status_name}", response_model=list[NotificationRead])
def list_notifications_with_status(
    status_name: str,
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[NotificationRead]:
    try:
        notifications = list_notifications_by_status(db, status_name, limit=limit)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_notification_to_schema(notification) for notification in notifications]


@router.post("/read", response_model=NotificationMarkReadResponse)
def mark_as_read(
    payload: NotificationMarkReadRequest,
    db: Session = Depends(get_db),
) -> NotificationMarkReadResponse:
    updated = mark_notifications_read(db, payload.user_id, payload.unique_ids())
    return NotificationMarkReadResponse(updated=updated)


@router.post("/broadcast", response_model=BroadcastResponse)
async def broadcast(
    payload: BroadcastRequest,
    container: ServiceContainer = Depends(get_container),
) -> BroadcastResponse:
    """Push a transient message to every connected client; nothing is stored."""

    delivered = await container.publisher.push_to_all(
        payload.title, payload.message, payload.payload
    )
    return BroadcastResponse(delivered=delivered)


@router.get("/{notification_id}", response_model=NotificationRead)
def read_notification(
    notification_id: UUID,
    db: Session = Depends(get_db),
) -> NotificationRead:
    try:
        notification = get_notification(db, notification_id)
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _notification_to_schema(notification)


@router.post(
    "/{object_kind}/{route}",
    response_model=NotificationDispatchResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_notification(
    object_kind: str,
    route: str,
    parameters: Any = Body(default=None),
    title: str | None = Query(default=None, max_length=255),
    message: str | None = Query(default=None),
    channels: list[str] | None = Query(default=None),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> NotificationDispatchResponse:
    """Raise ``route`` with the opaque JSON body as its parameters."""

    try:
        requested_channels = parse_channels(_split_channels(channels))
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        entry = dispatcher.registry.lookup(route)
        expected_kind = entry.configuration.object_kind.name
        if expected_kind.lower() != object_kind.lower():
            raise RouteNotFoundError(
                route,
                detail=f"Route '{route}' belongs to object kind '{expected_kind}', "
                f"not '{object_kind}'",
            )
        result = await dispatcher.dispatch(
            NotificationRequest(
                route=route,
                parameters=parameters,
                title=title,
                message=message,
                channels=requested_channels,
            )
        )
    except NotificationServiceError as exc:
        raise to_http_exception(exc) from exc
    return _result_to_schema(result)


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Stream notifications to one user; unread ones are sent on connect."""

    container: ServiceContainer = websocket.app.state.container
    try:
        user_id = UUID(websocket.query_params.get("user_id", ""))
    except ValueError:
        await websocket.close(code=1008)
        return

    def load_pending() -> list[Notification]:
        with session_scope(container.session_factory) as session:
            page = list_user_notifications(
                session, user_id, unread_only=True, page_size=BACKLOG_SIZE
            )
            return page.items

    def acknowledge(ids: list[UUID]) -> int:
        with session_scope(container.session_factory) as session:
            return mark_notifications_read(session, user_id, ids)

    pending = await to_thread.run_sync(load_pending)
    manager = container.manager
    await manager.connect(user_id, websocket)
    try:
        if pending:
            await websocket.send_json(
                {"type": "init", "data": [serialize_notification(n) for n in pending]}
            )
        while True:
            try:
                message = json.loads(await websocket.receive_text())
            except ValueError:
                continue
            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                ids = _parse_ids(message.get("ids"))
                if ids:
                    await to_thread.run_sync(acknowledge, ids)
    except WebSocketDisconnect:
        logger.debug("Websocket of user %s disconnected", user_id)
    finally:
        manager.disconnect(user_id, websocket)


def _parse_ids(values: Any) -> list[UUID]:
    if not isinstance(values, list):
        return []
    ids: list[UUID] = []
    for value in values:
        try:
            ids.append(UUID(str(value)))
        except ValueError:
            continue
    return ids
