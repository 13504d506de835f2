"""
Release Manager

Publishes a dated build artifact as a GitHub release and prunes older
releases under a time-spaced, bounded retention policy.
"""

try:
    from importlib.metadata import version

    __version__ = version("release-manager")
except Exception:
    __version__ = "0.0.0"  # Fallback for development
