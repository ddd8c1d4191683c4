"""Custom exception hierarchy for the OpsWorks SSH helper."""


class OsshError(Exception):
    """Base exception for all tool errors."""


class ConfigError(OsshError):
    """Invalid or missing configuration."""


class ProviderError(OsshError):
    """Error communicating with the EC2 API."""


class AmbiguousTargetError(OsshError):
    """Connect mode matched more than one running instance."""

    def __init__(self, message: str = "multiple hosts matched, be more specific"):
        super().__init__(message)


class SSHLaunchError(OsshError):
    """The local ssh client could not be executed."""
