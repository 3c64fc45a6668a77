"""Exception types raised by the signing and relay layers."""


class RelayError(Exception):
    """Base class for errors raised while preparing an outbound call."""


class ConfigurationError(RelayError):
    """Key material required by the signing scheme is missing or malformed."""


class CanonicalizationError(RelayError, ValueError):
    """A value cannot be represented as JSON for signing."""
