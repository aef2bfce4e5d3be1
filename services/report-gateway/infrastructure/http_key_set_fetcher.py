"""HTTP implementation of the KeySetFetcher interface."""

import httpx
from jwcrypto.common import JWException
from jwcrypto.jwk import JWKSet
from report_common.logging import setup_logging

from exceptions import KeySetFetchError
from interfaces import KeySetFetcher

logger = setup_logging()


class HttpKeySetFetcher(KeySetFetcher):
    """Downloads a JWK set document with a single GET, without retries."""

    def __init__(self, client: httpx.Client):
        self._client = client

    def fetch(self, url: str) -> JWKSet:
        try:
            response = self._client.get(url)
            response.raise_for_status()
            key_set = JWKSet.from_json(response.text)
        except (httpx.HTTPError, JWException, ValueError) as e:
            logger.exception("Key set fetch failed", extra={"url": url})
            raise KeySetFetchError(url, cause=e) from e

        if not key_set["keys"]:
            logger.error("Key set is empty", extra={"url": url})
            raise KeySetFetchError(url)

        logger.info(
            "Key set fetched",
            extra={"url": url, "key_count": len(key_set["keys"])},
        )
        return key_set
