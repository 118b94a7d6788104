"""
Provider token cache.

Holds the current signed provider token and re-signs lazily, on the first
request made after the token has aged past the reset interval or after
invalidate() was called. There is no background refresh.
"""

import asyncio
import logging
import math
import time
from typing import Callable, Optional

from apnsgate.services.push.constants import JWT_ALGORITHM, RESET_TOKEN_INTERVAL_MS
from apnsgate.services.push.models import SigningToken
from apnsgate.services.push.signing import Signer

logger = logging.getLogger(__name__)


class TokenCache:
    """
    Single-flight cache for the APNs provider token.

    Concurrent callers that find the cache empty wait on one refresh
    instead of each signing their own token.

    Attributes:
        team: Issuer (``iss``) claim
        key_id: Key identifier passed to the signer
        reset_interval_ms: Maximum token age before re-signing
    """

    def __init__(
        self,
        signer: Signer,
        team: str,
        key_id: str,
        clock: Callable[[], float] = time.time,
        reset_interval_ms: int = RESET_TOKEN_INTERVAL_MS,
    ):
        self._signer = signer
        self.team = team
        self.key_id = key_id
        self.reset_interval_ms = reset_interval_ms
        self._clock = clock
        self._token: Optional[SigningToken] = None
        self._refresh_lock = asyncio.Lock()

    @property
    def current(self) -> Optional[SigningToken]:
        """The cached token, if any (fresh or not)."""
        return self._token

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _fresh_token(self) -> Optional[SigningToken]:
        token = self._token
        if token is not None and self._now_ms() - token.timestamp < self.reset_interval_ms:
            return token
        return None

    async def get_token(self) -> str:
        """Return a valid provider token, signing a new one if needed."""
        token = self._fresh_token()
        if token is not None:
            return token.value

        async with self._refresh_lock:
            # Another caller may have refreshed while we waited
            token = self._fresh_token()
            if token is not None:
                return token.value

            claims = {
                "iss": self.team,
                "iat": math.floor(self._clock()),
            }
            value = await self._signer.sign(claims, algorithm=JWT_ALGORITHM, key_id=self.key_id)
            self._token = SigningToken(value=value, timestamp=self._now_ms())

            logger.debug(
                "Signed new APNS provider token",
                extra={"team": self.team, "key_id": self.key_id},
            )
            return value

    def invalidate(self) -> None:
        """Drop the cached token so the next get_token() signs again."""
        if self._token is not None:
            logger.info("APNS provider token invalidated", extra={"key_id": self.key_id})
        self._token = None
