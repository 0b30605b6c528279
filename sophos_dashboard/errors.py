"""
Error taxonomy.

Everything below the service layer raises one of these; EndpointService
catches them and falls back to the sample dataset.
"""


class DashboardError(Exception):
    """Base class for all dashboard exceptions."""


class CredentialsMissing(DashboardError):
    """No usable Sophos credentials are configured."""


class AuthError(DashboardError):
    """Raised when the OAuth2 token exchange is rejected or malformed."""


class FetchError(DashboardError):
    """Raised when the endpoint inventory cannot be retrieved."""


class StorageError(DashboardError):
    """Raised when the secrets file cannot be read or written."""
