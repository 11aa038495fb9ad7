"""Resolver contract implemented by every notification route."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from app.domain.entities import NotificationRequest, User
from app.domain.errors import MissingParameterError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


class DataResolver(Protocol):
    """Turns a request into recipients and template variables for one route."""

    route: str

    async def resolve_recipients(self, request: NotificationRequest) -> Sequence[User]:
        ...

    async def resolve_template_data(self, request: NotificationRequest) -> Mapping[str, Any]:
        ...


def decode_parameters(request: NotificationRequest, model: type[PayloadT]) -> PayloadT:
    """Validate ``request.parameters`` against the route payload ``model``.

    JSON text is accepted as well as an already decoded mapping. Any missing
    or malformed field is reported as :class:`MissingParameterError`.
    """

    payload = request.parameters
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            payload = json.loads(payload) if payload else None
        except ValueError as exc:
            raise MissingParameterError(request.route, ["parameters"]) from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise MissingParameterError(request.route, ["parameters"])

    try:
        return model.model_validate(dict(payload))
    except ValidationError as exc:
        fields = [
            ".".join(str(part) for part in error.get("loc", ())) or "parameters"
            for error in exc.errors()
        ]
        raise MissingParameterError(request.route, list(dict.fromkeys(fields))) from exc


__all__ = ["DataResolver", "decode_parameters"]
