"""Bearer token verification against the issuer's published key set."""

import json

from jwcrypto import jwt
from jwcrypto.common import JWException
from pydantic import ValidationError
from report_common.logging import setup_logging

from domain.key_set_cache import KeySetCache
from domain.models import TokenClaims
from exceptions import CredentialRejectedError, KeySetFetchError, MalformedCredentialError

logger = setup_logging()

BEARER_SCHEME = "Bearer"
ISSUER_PATH = "/auth/v1"
KEY_SET_PATH = f"{ISSUER_PATH}/.well-known/jwks.json"
EXPECTED_AUDIENCE = "authenticated"
ALLOWED_ALGORITHMS = ["RS256", "ES256"]


def key_set_url(issuer_url: str) -> str:
    """Returns the well-known key set location for an issuer base URL."""
    return f"{issuer_url}{KEY_SET_PATH}"


def expected_issuer(issuer_url: str) -> str:
    """Returns the ``iss`` claim value tokens from ``issuer_url`` must carry."""
    return f"{issuer_url}{ISSUER_PATH}"


class TokenVerifier:
    """Turns an Authorization header into a trusted subject identifier."""

    def __init__(self, key_set_cache: KeySetCache):
        self._key_sets = key_set_cache

    def verify(self, header_value: str | None, issuer_url: str) -> str:
        """
        Verifies a ``Bearer <token>`` header and returns the token subject.

        Args:
            header_value: Raw Authorization header value, or None if absent.
            issuer_url: Base location of the trusted identity provider.

        Returns:
            The verified ``sub`` claim.

        Raises:
            MalformedCredentialError: If the header is missing or not a
                two-part Bearer credential.
            CredentialRejectedError: If the key set cannot be fetched, the
                signature is invalid, issuer/audience do not match, the token
                is expired or the subject is missing.
        """
        token = self._extract_token(header_value)
        claims = self.verify_claims(token, issuer_url)

        if not claims.sub:
            logger.warning("Token rejected", extra={"reason": "missing sub claim"})
            raise CredentialRejectedError("Token missing sub claim")

        logger.debug(
            "Token verified",
            extra={"subject_id": claims.sub, "role": claims.role},
        )
        return claims.sub

    def verify_claims(self, token: str, issuer_url: str) -> TokenClaims:
        """
        Checks signature, issuer, audience and expiry of a raw token.

        Raises:
            CredentialRejectedError: If any check fails.
        """
        try:
            key_set = self._key_sets.get(key_set_url(issuer_url))
        except KeySetFetchError as e:
            raise CredentialRejectedError(str(e), cause=e) from e

        verified = jwt.JWT(
            algs=ALLOWED_ALGORITHMS,
            check_claims={
                "iss": expected_issuer(issuer_url),
                "aud": EXPECTED_AUDIENCE,
                "exp": None,
            },
            expected_type="JWS",
        )
        # No clock skew allowance: a token is rejected the second it expires.
        verified.leeway = 0
        try:
            verified.deserialize(token, key_set)
            return TokenClaims.model_validate(json.loads(verified.claims))
        except (JWException, ValueError, TypeError, ValidationError) as e:
            logger.warning("Token rejected", extra={"reason": str(e)})
            raise CredentialRejectedError(str(e) or type(e).__name__, cause=e) from e

    def _extract_token(self, header_value: str | None) -> str:
        if not header_value:
            raise MalformedCredentialError("Missing Authorization header")

        parts = header_value.split(" ")
        if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1]:
            raise MalformedCredentialError(
                "Invalid Authorization header format. Expected: Bearer <token>"
            )
        return parts[1]
