"""Error types shared by the relay server and the local sync client."""


class NutriSyncError(Exception):
    """Base class for all nutrisync errors."""


class ConfigurationError(NutriSyncError):
    """A required external credential or setting is missing."""


class LocalStoreError(NutriSyncError):
    """The local store rejected a statement (constraint, type or I/O failure)."""


class RelayError(NutriSyncError):
    """Transport-level failure talking to the relay server (timeout, connection, non-2xx)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExternalServiceError(NutriSyncError):
    """An upstream third-party API returned an error."""


class AIResponseValidationError(ExternalServiceError):
    """The AI service answered with malformed JSON or an unexpected shape."""


class FitbitError(ExternalServiceError):
    """Fitbit API call failed."""


class FitbitNotConnectedError(FitbitError):
    """No Fitbit credential stored for the owner."""


class FitbitTokenRefreshError(FitbitError):
    """Refreshing an expired Fitbit token failed; the push cycle is abandoned."""


class RecordOwnershipError(NutriSyncError):
    """An upserted id already belongs to a different owner."""
