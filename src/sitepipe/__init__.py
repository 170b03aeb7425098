"""sitepipe: front-end asset pipeline CLI."""

__version__ = "0.1.0"
