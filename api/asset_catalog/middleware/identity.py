"""Identity middleware.

The hosting platform authenticates users and forwards the result in the
``x-ms-client-principal`` header (base64 JSON). This module only decodes and
sanity-checks that header; it never validates tokens itself.
"""

import base64
import binascii
import json
import logging
from typing import Any, Dict, List, Mapping, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from asset_catalog.config import Settings

logger = logging.getLogger(__name__)

PRINCIPAL_HEADER = "x-ms-client-principal"
DEV_HOUSEHOLD_HEADER = "x-household-id"


def parse_client_principal(
    header_value: Optional[str], trusted_providers: List[str]
) -> Optional[Dict[str, Any]]:
    """Decode a client principal header, or None if absent or malformed.

    Example:
        >>> raw = base64.b64encode(json.dumps({
        ...     "userId": "u1", "userDetails": "a@b.c",
        ...     "identityProvider": "aad", "userRoles": ["authenticated"],
        ... }).encode()).decode()
        >>> parse_client_principal(raw, ["aad"])["userId"]
        'u1'
    """
    if not header_value:
        return None

    try:
        principal = json.loads(base64.b64decode(header_value).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.error(f"Failed to parse client principal: {e}")
        return None

    if not isinstance(principal, dict):
        return None

    user_id = principal.get("userId")
    provider = principal.get("identityProvider")
    if (
        not isinstance(user_id, str)
        or not user_id
        or not isinstance(principal.get("userDetails"), str)
        or not isinstance(provider, str)
        or not isinstance(principal.get("userRoles"), list)
    ):
        logger.error(
            f"Invalid client principal structure: has_user_id={bool(user_id)}, "
            f"identity_provider={provider!r}"
        )
        return None

    if provider.lower() not in trusted_providers:
        logger.error(f"Untrusted identity provider: {provider}")
        return None

    return principal


def resolve_user_id(headers: Mapping[str, str], settings: Settings) -> Optional[str]:
    """Resolve the caller's user/household id from request headers.

    The platform principal always wins. The ``x-household-id`` header is a
    development-only fallback and is ignored in production.
    """
    principal = parse_client_principal(
        headers.get(PRINCIPAL_HEADER), settings.trusted_providers
    )
    if principal:
        return principal["userId"]

    household_id = headers.get(DEV_HOUSEHOLD_HEADER)
    if household_id:
        if settings.is_local_development:
            logger.warning("Using x-household-id header (local dev mode only)")
            return household_id
        logger.warning(
            "x-household-id header ignored in production; "
            "request must include x-ms-client-principal"
        )

    return None


class IdentityMiddleware(BaseHTTPMiddleware):
    """Resolve the caller's identity once and store it on ``request.state``."""

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next):
        request.state.user_id = resolve_user_id(request.headers, self.settings)

        response: Response = await call_next(request)
        return response
