"""Drive long-running cluster admin tasks (backup/restore) to completion."""

__version__ = "0.1.0"
