"""WSGI entrypoint for serving the CLT vs PJ backend behind Passenger or gunicorn."""

import logging

from cltpj.backend.app import create_app

logging.basicConfig(level=logging.INFO)

# Passenger expects a module-level variable named ``application``.
application = create_app()
