import functools
import logging
import uuid

from django.conf import settings
from django.shortcuts import redirect

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'user'
USER_ID_HEADER = 'User-Id'


def current_user(request):
    """The user id stored in the session, or None."""
    value = request.session.get(SESSION_USER_KEY)
    if not value:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        logger.info("Ignoring malformed user id in session: %r", value)
        return None


def authenticate(user_id):
    """Headers identifying *user_id* to a remote service."""
    return {USER_ID_HEADER: str(user_id)}


def require_user(view):
    """Run *view* as ``view(request, user_id, ...)`` or redirect to sign-in."""

    @functools.wraps(view)
    async def wrapper(request, *args, **kwargs):
        user_id = current_user(request)
        if user_id is None:
            logger.info("Unauthenticated request to %s", request.path)
            return redirect(settings.LOGIN_URL)
        return await view(request, user_id, *args, **kwargs)

    return wrapper
