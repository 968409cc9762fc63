from typing import Optional

from fastapi import HTTPException, Request, status

from .config import get_settings


async def verify_internal_key(request: Request) -> None:
    """Reject requests without the internal API key, when one is configured."""
    settings = get_settings()
    expected: Optional[str] = settings.internal_api_key
    if not expected:
        return

    provided = request.headers.get(settings.api_key_header)
    if provided is None or provided.strip() != expected:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
