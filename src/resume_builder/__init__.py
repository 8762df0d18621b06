"""AI resume builder: generation service, archive and document renderer."""

__version__ = "0.1.0"
