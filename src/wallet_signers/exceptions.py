from __future__ import annotations


class ConfigurationError(ValueError):
    pass


class SigningError(ValueError):
    pass


class Eip712Error(SigningError):
    """The typed-data payload could not be encoded into a digest."""


class TransactionEncodingError(SigningError):
    """The transaction could not be serialized into a signing hash."""
