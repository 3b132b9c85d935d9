# cath/api/deps.py

"""
Page dependencies: the signed-in user lives in the session as a plain dict
({id, email, role, provenance, firstName, surname}).
"""
from typing import Callable, Optional

from fastapi import Request

from cath.core.security import csrf_token_matches
from cath.db.models import UserRole
from cath.utils.exceptions import CsrfError, ForbiddenError, NotAuthenticatedError

ADMIN_ROLES = (
    UserRole.SYSTEM_ADMIN,
    UserRole.INTERNAL_ADMIN_CTSC,
    UserRole.INTERNAL_ADMIN_LOCAL,
)
UNSAFE_METHODS = {"POST", "PUT", "PATCH", "DELETE"}


def get_session_user(request: Request) -> Optional[dict]:
    return request.session.get("user")


def require_role(*roles: UserRole) -> Callable[[Request], dict]:
    """
    Anonymous users are sent to /login; signed-in users without one of
    `roles` get a 403.
    """
    allowed = {role.value for role in roles}

    def dependency(request: Request) -> dict:
        user = get_session_user(request)
        if not user:
            raise NotAuthenticatedError()
        if user.get("role") not in allowed:
            raise ForbiddenError()
        return user

    return dependency


async def verify_csrf(request: Request) -> None:
    """
    Page routers only. The token comes from the X-CSRF-Token header or the
    _csrf form field; the parsed form is cached on the request, so handlers
    can read it again.
    """
    if request.method not in UNSAFE_METHODS:
        return
    token = request.headers.get("X-CSRF-Token")
    if token is None:
        form = await request.form()
        token = form.get("_csrf")
    if not csrf_token_matches(request, token if isinstance(token, str) else None):
        raise CsrfError()


require_admin = require_role(*ADMIN_ROLES)
require_system_admin = require_role(UserRole.SYSTEM_ADMIN)
require_verified = require_role(UserRole.VERIFIED)
