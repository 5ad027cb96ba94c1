"""Cloud sign-in and progress sync.

No cloud backend is configured in this build, so every operation that would
talk to one raises CloudSyncError instead of pretending to succeed.
"""
import logging

logger = logging.getLogger(__name__)


class CloudSyncError(RuntimeError):
    """A cloud sign-in or sync operation is not available."""


def init_sync() -> None:
    logger.debug("Cloud sync not configured; progress stays local")


def sign_in_with_google():
    raise CloudSyncError("Google sign-in is not available yet")


def sign_out() -> None:
    raise CloudSyncError("Sign out is not available yet")


def get_current_user():
    return None


def is_authenticated() -> bool:
    return False


def push_progress(store) -> None:
    raise CloudSyncError("Cloud sync is not available; progress is saved locally only")


def pull_progress(store) -> None:
    raise CloudSyncError("Cloud sync is not available; progress is saved locally only")
