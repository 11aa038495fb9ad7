"""Common validation helpers for user use cases."""


def ensure_valid_email(email: str) -> str:
    """Return a normalized address or raise ``ValueError``."""

    normalized = email.strip()
    if normalized.count("@") != 1:
        raise ValueError("A valid email address is required")

    local_part, domain = normalized.split("@", 1)
    if not local_part or "." not in domain:
        raise ValueError("A valid email address is required")

    return f"{local_part}@{domain.lower()}"
