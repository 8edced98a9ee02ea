"""Resolve Sentry project ids to slugs from the command line."""

__version__ = "0.1.0"
