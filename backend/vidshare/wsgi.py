"""WSGI entry point (``gunicorn vidshare.wsgi:app``)."""

from __future__ import annotations

from vidshare import create_app

app = create_app()
