"""
Application package initializer.

The service is split into ``core`` (settings, logging, errors and the
database pool), ``schemas`` (request and response models),
``services`` (queries against the record store) and ``api`` (versioned
HTTP routers).
"""

from .main import app  # noqa: F401
