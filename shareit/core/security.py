import hmac

from fastapi import HTTPException

from shareit.core.config import Settings


def verify_password(settings: Settings, password: str | None) -> bool:
    if password is None:
        return False
    return hmac.compare_digest(password.encode(), settings.ADMIN_PASSWORD.encode())


def require_password(settings: Settings, password: str | None, action: str):
    """Raises 403 unless ``password`` matches the configured admin password."""
    if not verify_password(settings, password):
        raise HTTPException(status_code=403, detail=f"Invalid password for {action}.")
