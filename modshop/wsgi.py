"""
wsgi.py — Process entry point.

    flask --app modshop.wsgi run
    gunicorn modshop.wsgi:app

Creating the app creates and seeds the database (SEED_DATABASE).
"""

import os

from modshop.app import create_app

app = create_app(os.getenv("FLASK_ENV", "development"))
