"""WSGI entrypoint: ``gunicorn -c gunicorn.conf.py wsgi:app``."""

from __future__ import annotations

from authapp import create_app

app = create_app()
