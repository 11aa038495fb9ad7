from .notification import (
    BroadcastRequest,
    BroadcastResponse,
    ChannelDeliveryRead,
    NotificationDispatchResponse,
    NotificationMarkReadRequest,
    NotificationMarkReadResponse,
    NotificationPageRead,
    NotificationRead,
    NotificationSearchRequest,
    QueryFilterIn,
    SortOptionIn,
)
from .preference import RoutePreferenceItem, RoutePreferenceRead, RoutePreferencesUpdate
from .route import ObjectKindRead, RouteRead
from .user import UserCreate, UserRead, UserSummaryRead

__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "ChannelDeliveryRead",
    "NotificationDispatchResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationSearchRequest",
    "ObjectKindRead",
    "QueryFilterIn",
    "RoutePreferenceItem",
    "RoutePreferenceRead",
    "RoutePreferencesUpdate",
    "RouteRead",
    "SortOptionIn",
    "UserCreate",
    "UserRead",
    "UserSummaryRead",
]
