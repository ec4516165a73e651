"""Authentication dependencies.

Two kinds of caller reach this service:

- End users, via the gateway. The gateway has already authenticated them and
  forwards their identity in ``X-User-Id`` (plus optional ``X-User-Email`` and
  ``X-User-Role``). A request without it is rejected with 401.
- Other backend services, which present the shared service token in
  ``X-Service-Token`` or as ``Authorization: Bearer <token>``. A request
  without the right token is rejected with 403.

Usage:
    from notification_service.core.dependencies.auth import CurrentUser, ServiceCaller

    @router.get("/notifications")
    async def list_notifications(user: CurrentUser): ...

    @router.post("/notifications/send", dependencies=[ServiceCaller])
    async def send(...): ...
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Depends, Request

from notification_service.core.exceptions import ForbiddenException, UnauthorizedException
from notification_service.core.schemas.auth import AuthUser
from notification_service.core.settings import AuthSettings, get_auth_settings
from notification_service.infra.logging import set_log_context

logger = logging.getLogger(__name__)

AuthSettingsDep = Annotated[AuthSettings, Depends(get_auth_settings)]


async def get_current_user(request: Request, settings: AuthSettingsDep) -> AuthUser:
    """Resolve the end user from gateway headers.

    Raises:
        UnauthorizedException: If the user id header is missing or blank.
    """
    user_id = (request.headers.get(settings.user_id_header) or "").strip()
    if not user_id:
        logger.info(
            "Rejected request without user identity",
            extra={"path": request.url.path, "operation": "auth.get_current_user"},
        )
        raise UnauthorizedException(detail="Authentication required")

    set_log_context(user_id=user_id)
    return AuthUser(
        user_id=user_id,
        email=request.headers.get(settings.user_email_header) or None,
        role=request.headers.get(settings.user_role_header) or None,
    )


def _extract_service_token(request: Request) -> str | None:
    token = request.headers.get("X-Service-Token")
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def require_service_token(request: Request, settings: AuthSettingsDep) -> None:
    """Reject callers that do not present the shared service token.

    Raises:
        ForbiddenException: If the token is missing or does not match.
    """
    presented = _extract_service_token(request)
    expected = settings.service_token.get_secret_value()
    if presented is None or not hmac.compare_digest(presented.encode(), expected.encode()):
        logger.warning(
            "Rejected service call with missing or invalid token",
            extra={
                "path": request.url.path,
                "token_present": presented is not None,
                "operation": "auth.require_service_token",
            },
        )
        raise ForbiddenException(detail="Service token required")


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]
ServiceCaller = Depends(require_service_token)
