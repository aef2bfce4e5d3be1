"""Custom exceptions for the report-gateway service."""


class MalformedCredentialError(Exception):
    """Raised when the Authorization header is absent or not a Bearer credential."""

    def __init__(self, message: str):
        super().__init__(message)


class CredentialRejectedError(Exception):
    """Raised when a bearer token fails signature or claim verification."""

    def __init__(self, reason: str, cause: Exception | None = None):
        self.reason = reason
        self.cause = cause
        super().__init__(f"JWT verification failed: {reason}")


class KeySetFetchError(Exception):
    """Raised when the issuer's published key set cannot be retrieved."""

    def __init__(self, url: str, cause: Exception | None = None):
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to fetch key set from '{url}'")


class MissingFieldError(Exception):
    """Raised when a required request field is absent or empty."""

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(f"Missing {field_name}")


class GrantIssuanceError(Exception):
    """Raised when the storage service cannot mint an upload grant."""

    def __init__(self, slot: str, object_name: str, cause: Exception | None = None):
        self.slot = slot
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to create {slot} upload URL")


class ReportPersistenceError(Exception):
    """Raised when inserting a report row into the database fails."""

    def __init__(self, report_id: str, cause: Exception | None = None):
        self.report_id = report_id
        self.cause = cause
        super().__init__(f"Failed to persist report '{report_id}' to database")


class ConfigurationMissingError(Exception):
    """Raised when a required deployment setting is absent."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Missing {setting}")


class StorageGrantError(Exception):
    """Raised when the storage backend fails to presign an upload."""

    def __init__(self, bucket_name: str, object_name: str, cause: Exception | None = None):
        self.bucket_name = bucket_name
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Failed to presign '{object_name}' in bucket '{bucket_name}'")
