"""WSGI entrypoint for hosting the calculator API behind Passenger or gunicorn."""

from newregime.backend.app import create_app

# Passenger expects a module-level variable named ``application``.
application = create_app()
