"""Browser-based four-button rhythm game controller: server, button state and key events."""

__version__ = "0.1.2"