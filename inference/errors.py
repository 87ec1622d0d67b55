"""
Inference error taxonomy.

Every failure raised by the inference layer derives from InferenceError so
callers at the message-protocol boundary can catch one type. The message of
each exception is what the caller ultimately shows to the user.
"""

from typing import Optional


class InferenceError(Exception):
    """Base class for all inference-layer failures."""
    pass


class Unavailable(InferenceError):
    """The inference service is unreachable or answered the probe with non-2xx."""

    def __init__(self, message: str = "Inference service is not available"):
        super().__init__(message)


class InferenceTimeout(Unavailable):
    """The inference service did not answer within the configured timeout."""

    def __init__(self, timeout_s: float):
        self.timeout_s = timeout_s
        super().__init__(f"Inference service did not respond within {timeout_s:g}s")


class HTTPError(InferenceError):
    """A generation endpoint answered with a non-2xx status."""

    def __init__(self, status: int, detail: Optional[str] = None):
        self.status = status
        self.detail = detail
        message = f"HTTP error {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class EmptyResponse(InferenceError):
    """No usable text could be recovered from the service's reply."""

    def __init__(self, message: str = "Empty response from inference service"):
        super().__init__(message)
