"""
exceptions.py

Centralized custom exception types for the library.

Every public operation either returns a populated result or raises one of the
exceptions below. Each error carries an optional numeric code and optional raw
response object for easier debugging.
"""

from typing import Optional, Any


class UModError(Exception):
    """
    Base class for all library-specific exceptions.

    Attributes
    ----------
    message: str
        Human readable error message.
    code: Optional[int]
        HTTP status code if applicable.
    response: Optional[Any]
        Raw response object (requests.Response or API payload) for debugging.
    """

    def __init__(self, message: str, code: Optional[int] = None, response: Optional[Any] = None):
        self.message = message
        self.code = code
        self.response = response
        super().__init__(self.__str__())

    def __str__(self) -> str:
        base = f"[UModError] {self.message}"
        if self.code is not None:
            base += f" (code={self.code})"
        return base

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} code={self.code!r} message={self.message!r}>"


class NetworkError(UModError):
    """Network / transport related error (DNS, TLS, timeouts, connection failures)."""


class HTTPStatusError(UModError):
    """The server answered with a status code >= 400. The code is in `.code`."""


class BadRequestError(HTTPStatusError):
    """HTTP 400 - The server rejected the query parameters."""


class NotFoundError(HTTPStatusError):
    """HTTP 404 - Requested resource not found."""


class RateLimitError(HTTPStatusError):
    """HTTP 429 - Rate limit exceeded."""


class ServerError(HTTPStatusError):
    """5xx - Server-side error from umod.org."""


class InvalidResponseError(UModError):
    """Raised when the API returns malformed/unparseable data."""


class NoSuchPageError(UModError):
    """Raised when navigating to a result page that does not exist."""


class DownloadError(UModError):
    """Raised for plugin download errors (I/O, remote 4xx/5xx, checksum mismatch)."""


def map_http_status(status_code: int, message: str = "", response: Optional[Any] = None) -> HTTPStatusError:
    """
    Convert an HTTP status code + message into an appropriate HTTPStatusError instance.

    Parameters
    ----------
    status_code : int
        HTTP status code returned by the server.
    message : str
        Response text or short explanation.
    response : Any
        Raw response object (optional) to attach to the exception instance.

    Returns
    -------
    HTTPStatusError
        An instance of a subclass representing the status.
    """
    if status_code == 400:
        return BadRequestError(message or "Bad Request", status_code, response)
    if status_code == 404:
        return NotFoundError(message or "Not Found", status_code, response)
    if status_code == 429:
        return RateLimitError(message or "Rate Limited", status_code, response)
    if 500 <= status_code <= 599:
        return ServerError(message or "Server Error", status_code, response)
    return HTTPStatusError(message or f"HTTP {status_code}", status_code, response)


__all__ = [
    "UModError",
    "NetworkError",
    "HTTPStatusError",
    "BadRequestError",
    "NotFoundError",
    "RateLimitError",
    "ServerError",
    "InvalidResponseError",
    "NoSuchPageError",
    "DownloadError",
    "map_http_status",
]
