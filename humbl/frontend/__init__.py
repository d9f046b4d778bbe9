"""Frontend package exports."""
from __future__ import annotations

from .gradio_app import create_frontend

__all__ = ["create_frontend"]
