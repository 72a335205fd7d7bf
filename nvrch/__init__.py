"""Course catalogue HTTP server backed by SQLite, with a JSON model and request parser."""

__version__ = "0.1.0"
__all__ = ["textutil", "jsonvalue", "http", "app"]