"""FastAPI application entry point.

This module builds the ``FastAPI`` application from the settings loaded at
process start. The relay handler, its signer and its outbound client are
created once here and reused for every request.
"""

from config.settings import settings
from relay import create_app

app = create_app(settings)
