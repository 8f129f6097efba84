"""docclerk: documentation index builder and local/remote reconciliation."""

__version__ = "0.1.0"
