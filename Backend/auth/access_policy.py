import logging

from utils.errors import AuthorizationError
from utils.system_settings import SystemSettings

logger = logging.getLogger(__name__)

PASSWORD_HEADER = "X-Server-Password"


def is_authorized(settings: SystemSettings, credential) -> bool:
    if not settings.password_required:
        return True
    # Plain equality against the stored secret; no hashing or constant-time compare.
    return credential == settings.server_password


def authorize(settings: SystemSettings, credential, path="", remote_addr=None):
    """Raise AuthorizationError unless the credential opens the protected routes."""
    if is_authorized(settings, credential):
        return
    logger.warning(
        "Rejected %s credential for %s from %s",
        "missing" if credential is None else "wrong",
        path,
        remote_addr or "unknown",
    )
    raise AuthorizationError()
