"""Exception hierarchy for release_manager."""


class ReleaseManagerError(Exception):
    """Base class for all release manager errors."""


class ConfigError(ReleaseManagerError):
    """Missing or invalid configuration (e.g. no credential)."""


class HistoryError(ReleaseManagerError):
    """Release history could not be read or written."""


class ReleaseHostError(ReleaseManagerError):
    """A remote release operation failed."""
