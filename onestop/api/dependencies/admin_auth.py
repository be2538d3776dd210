# onestop/api/dependencies/admin_auth.py
from typing import Optional

from fastapi import Header, HTTPException, status

from onestop.core.config import get_settings

ADMIN_KEY_REJECTED = "Approval endpoints require a valid X-Admin-Api-Key header."


async def verify_admin_api_key(
    admin_api_key: Optional[str] = Header(
        default=None,
        alias="X-Admin-Api-Key",
        description="Shared key of the approval screens (facility, travel and vehicle desks).",
    ),
) -> None:
    """
    Guard for the approval screens mounted under /admin.

    Approvers change booking and request statuses, so every call must carry
    the shared admin key. On a developer machine or in the test suite the
    key may be left unset, which opens the approval screens; once a key is
    configured it is always enforced. Deployed environments refuse to serve
    approvals at all until a key is configured.
    """
    settings = get_settings()
    env = (settings.APP_ENV or "local").lower()
    configured_key = getattr(settings, "ADMIN_API_KEY", None)

    if not configured_key:
        if env in ("local", "test"):
            return
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Approval endpoints are disabled: ADMIN_API_KEY is not set for APP_ENV={env}.",
        )

    if admin_api_key != configured_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ADMIN_KEY_REJECTED,
        )
