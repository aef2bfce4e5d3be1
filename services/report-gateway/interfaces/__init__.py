"""Abstract interfaces for infrastructure dependencies."""

from interfaces.key_set_fetcher import KeySetFetcher
from interfaces.storage import UploadGrantIssuer

__all__ = ["KeySetFetcher", "UploadGrantIssuer"]
