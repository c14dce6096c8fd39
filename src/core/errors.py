"""Exception hierarchy shared by the core and the adapters."""

from __future__ import annotations


class TaskbarTwitchError(Exception):
    """Base class for every error raised on purpose by this project."""


class ConfigError(TaskbarTwitchError):
    """The configuration document is missing, unreadable or invalid."""


class ApiError(TaskbarTwitchError):
    """Base class for failures talking to the Twitch APIs."""


class TransportError(ApiError):
    """Connection failure, timeout or 5xx. Safe to retry."""


class CredentialsRejectedError(ApiError):
    """The auth endpoint refused the client id/secret pair."""


class InvalidResponseError(ApiError):
    """The response body does not have the expected shape."""


class TokenExpiredError(ApiError):
    """The bearer token is no longer accepted by the status endpoint."""
