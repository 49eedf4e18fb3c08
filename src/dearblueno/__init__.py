"""Dear Blueno moderated anonymous posting service."""

__version__ = "0.1.0"
