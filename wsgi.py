#!/usr/bin/env python3
"""
WSGI entry point for production deployment.
Used by WSGI servers such as Gunicorn: `gunicorn wsgi:application`.
"""

from cvmate.app import create_app

# Create the CVMate application instance
application = create_app()

if __name__ == "__main__":
    application.run()
