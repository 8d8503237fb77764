class ContextApiError(Exception):
    """Base class for failures talking to the Context API."""


class TransportError(ContextApiError):
    """The request could not be sent or no response was received."""


class ResponseStatusError(ContextApiError):
    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ContentTypeError(ContextApiError):
    """A 200 response that is not application/json."""


class MalformedResponseError(ContextApiError):
    """A response body that does not have the expected JSON shape."""


class EntityLookupError(ContextApiError):
    """Resolving a single entity id did not yield exactly one entity."""


class ConfigurationError(Exception):
    """Unusable startup options. Raised before any network activity."""
