"""
WSGI config for the KisanSetu project.

HTTP only; the websocket channel needs the ASGI application.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'kisansetu.settings')

application = get_wsgi_application()
