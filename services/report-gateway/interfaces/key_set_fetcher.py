"""Abstract interface for retrieving published verification keys."""

from abc import ABC, abstractmethod

from jwcrypto.jwk import JWKSet


class KeySetFetcher(ABC):
    """Abstract base class for key set sources."""

    @abstractmethod
    def fetch(self, url: str) -> JWKSet:
        """
        Retrieves and parses the key set published at ``url``.

        Raises:
            KeySetFetchError: If the key set cannot be retrieved or parsed.
        """
        pass
