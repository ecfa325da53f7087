"""
Secure Token Generator

Produces the opaque value carried by an EmergencyToken.

The secure path draws 32 bytes from the OS CSPRNG and hex-encodes them
(64 characters, 256 bits). `insecure_token` exists only for runtimes without
an OS randomness source: it mixes `random` with the clock and is NOT
cryptographic. It is used only when explicitly allowed.
"""

import random
import secrets
import string
import time

import structlog

from sanjeevani.access.exceptions import SecureRandomUnavailable

logger = structlog.get_logger(__name__)

TOKEN_BYTES = 32

_BASE36 = string.digits + string.ascii_lowercase


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def secure_token(nbytes: int = TOKEN_BYTES) -> str:
    """Hex token from the OS CSPRNG."""
    return secrets.token_hex(nbytes)


def insecure_token() -> str:
    """Non-cryptographic token: random digits followed by the timestamp in ms."""
    return _base36(random.getrandbits(52)) + _base36(int(time.time() * 1000))


class SecureTokenGenerator:
    """
    Callable token source for the emergency access controller.

    Args:
        allow_insecure_fallback: Use `insecure_token` when the OS randomness
            source is unavailable instead of failing.
    """

    def __init__(self, allow_insecure_fallback: bool = False):
        self.allow_insecure_fallback = allow_insecure_fallback
        self.last_token_was_secure = True

    def __call__(self) -> str:
        try:
            value = secure_token()
        except NotImplementedError as e:
            if not self.allow_insecure_fallback:
                raise SecureRandomUnavailable(
                    "No cryptographic randomness source available"
                ) from e
            logger.warning(
                "Secure randomness unavailable, using non-cryptographic token",
                error=str(e),
            )
            self.last_token_was_secure = False
            return insecure_token()

        self.last_token_was_secure = True
        return value
