"""Use case for registering notification addressees."""

from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.repositories import UserRepository
from app.utils import now_in_app_timezone

from .validators import ensure_valid_email


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    user_id: UUID | None = None,
    phone_number: str | None = None,
    device_token: str | None = None,
) -> User:
    """Create a new user ensuring unique ids and email addresses."""

    repository = UserRepository(session)
    normalized_email = ensure_valid_email(email)

    if user_id is not None and repository.get(user_id):
        raise ValueError("A user with this id already exists")
    if repository.get_by_email(normalized_email):
        raise ValueError("This email address is already registered")

    cleaned_name = name.strip()
    if not cleaned_name:
        raise ValueError("Name must not be empty")

    user = User(
        id=user_id or uuid4(),
        name=cleaned_name,
        email=normalized_email,
        phone_number=phone_number,
        device_token=device_token,
        created_at=now_in_app_timezone(),
    )
    return repository.create(user)
