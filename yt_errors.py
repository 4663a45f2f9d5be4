"""
ytplay Exceptions
=================

Every failure that ends a run is one of these. They are raised at the stage
that fails and surface in ``ytplay.main()``, which prints the message and
exits nonzero.

Exception Hierarchy:
    YtPlayError (base)
    ├── DependencyMissingError
    ├── ConfigurationError
    ├── NetworkError (alias SearchError)
    ├── EmptyResultError (alias NoResultsError)
    └── InputError
"""

from typing import Any, Dict, Optional


class YtPlayError(Exception):
    """Base exception for all ytplay errors."""

    exit_code = 1

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            detail_str = ', '.join(f'{k}={v!r}' for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class DependencyMissingError(YtPlayError):
    """No supported media player binary is installed."""


class ConfigurationError(YtPlayError):
    """No usable API key could be resolved."""


class NetworkError(YtPlayError):
    """An API request failed after exhausting the retry budget."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status", status_code)
        super().__init__(message, details)
        self.status_code = status_code


class EmptyResultError(YtPlayError):
    """The search returned zero videos."""

    def __init__(self, message: str = "No results found.", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InputError(YtPlayError):
    """The menu selection was not a valid result number."""


SearchError = NetworkError
NoResultsError = EmptyResultError
