class UptimeError(Exception):
    """Base class for errors raised by the checker."""


class InvalidInput(UptimeError):
    """Rejected add-website payload. Nothing was written."""


class NotFound(UptimeError):
    """No registered website has the requested id."""


class StoreFailure(UptimeError):
    """A get/put against the key-value store failed."""


class NetworkFailure(UptimeError):
    """A probe could not complete. Recorded as a down result, never surfaced."""


class AuthNotConfigured(UptimeError):
    """Login attempted while no admin password is configured."""
