class EmailServiceError(Exception):
    """Base class for errors raised inside the email worker."""


class ResolutionError(EmailServiceError):
    """A template or user profile could not be resolved."""


class NotFound(ResolutionError):
    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class ServiceLookupError(ResolutionError):
    """The lookup service failed for a reason other than a missing key."""


class CacheError(EmailServiceError):
    """The cache store could not be read or written."""


class ValidationError(EmailServiceError):
    def __init__(self, missing):
        self.missing = list(missing)
        super().__init__(f"Missing required variables: {', '.join(self.missing)}")


class RenderError(EmailServiceError):
    pass


class DispatchError(EmailServiceError):
    """The outbound transport refused or failed to deliver a message."""


class TrackingError(EmailServiceError):
    """A tracking record could not be written. Logged, never surfaced."""
