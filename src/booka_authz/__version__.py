"""Version information for booka-authz."""

__version__ = "0.4.0"
