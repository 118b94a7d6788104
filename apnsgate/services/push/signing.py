"""
Provider token signing.

TokenCache only depends on the Signer protocol, so the JWT backend can be
swapped (or faked in tests) without touching the caching logic.
"""

import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from apnsgate.services.push.exceptions import SigningError

logger = logging.getLogger(__name__)


@runtime_checkable
class Signer(Protocol):
    """Anything that can turn a claims dict into a signed token string."""

    async def sign(self, claims: Dict[str, Any], algorithm: str, key_id: str) -> str:
        ...


class JWTSigner:
    """
    Signs provider tokens with PyJWT using the EC private key of a .p8 file.

    The key is parsed once, on first use.
    """

    def __init__(self, signing_key: str):
        self._signing_key = signing_key
        self._private_key: Optional[ec.EllipticCurvePrivateKey] = None

    def _load_private_key(self) -> ec.EllipticCurvePrivateKey:
        """Parse the PEM key material."""
        if self._private_key is None:
            try:
                private_key = serialization.load_pem_private_key(
                    self._signing_key.encode("utf-8"),
                    password=None,
                )
            except (ValueError, TypeError) as e:
                raise SigningError(f"Could not load APNS signing key: {e}") from e

            if not isinstance(private_key, ec.EllipticCurvePrivateKey):
                raise SigningError("APNS key must be an EC private key (ES256)")

            self._private_key = private_key
            logger.debug("Loaded APNS private key")

        return self._private_key

    async def sign(self, claims: Dict[str, Any], algorithm: str, key_id: str) -> str:
        private_key = self._load_private_key()
        return jwt.encode(
            claims,
            private_key,
            algorithm=algorithm,
            headers={"kid": key_id},
        )
