"""
Exception types shared by the services and routers.
"""


class ConfigurationError(Exception):
    """The LLM credential is missing. Fatal to the request."""


class UpstreamAuthError(Exception):
    """The LLM provider rejected the configured credential."""


class ParseError(Exception):
    """The LLM reply contained a JSON span that could not be decoded."""


class CatalogError(Exception):
    """The component catalog file is missing or malformed."""


class AccountNotFoundError(Exception):
    """No credit ledger row exists for the user."""

    def __init__(self, user_id: str):
        super().__init__(f"No credit account for {user_id[:8]}...")
        self.user_id = user_id


class InsufficientCreditsError(Exception):
    """The user has no credits left for a design request."""

    def __init__(self, user_id: str):
        super().__init__(f"No credits left for {user_id[:8]}...")
        self.user_id = user_id


class InvalidRequestError(Exception):
    """The design request body has no usable `request` text."""
