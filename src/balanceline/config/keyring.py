"""Optional system keyring storage for the relay account access token."""

import logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "balanceline"
ACCESS_TOKEN_KEY = "account:access_token"


def _check_keyring_available() -> bool:
    """Check if keyring module is available and functional."""
    try:
        import keyring

        backend = keyring.get_keyring()
        return backend is not None
    except Exception:
        logger.debug("System keyring unavailable", exc_info=True)
        return False


def store_access_token(value: str) -> bool:
    """Store the account access token in the system keyring.

    Returns:
        True if stored successfully, False otherwise
    """
    if not _check_keyring_available():
        return False

    try:
        import keyring

        keyring.set_password(SERVICE_NAME, ACCESS_TOKEN_KEY, value)
        return True
    except Exception:
        logger.warning("Could not store access token in keyring", exc_info=True)
        return False


def get_access_token() -> str | None:
    """Retrieve the account access token from the system keyring."""
    if not _check_keyring_available():
        return None

    try:
        import keyring

        return keyring.get_password(SERVICE_NAME, ACCESS_TOKEN_KEY)
    except Exception:
        logger.debug("Could not read access token from keyring", exc_info=True)
        return None

