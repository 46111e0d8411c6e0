"""
Scheme error taxonomy.

These never escape the view model or the loading service: they are turned
into ERROR events carrying the message unchanged.
"""


class SchemeError(Exception):
    """Base class for scheme loading failures"""
    pass


class FetchFailed(SchemeError):
    """Raised by a fetcher when the scheme could not be retrieved"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PayloadError(SchemeError, ValueError):
    """Raised when a decoded payload does not match the scheme schema"""
    pass
