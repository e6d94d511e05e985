"""
WSGI config for the hms project.

Exposes the WSGI callable as a module-level variable named ``application``.
Plain HTTP only; websocket updates need the ASGI entry point in ``hms.asgi``.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hms.settings')

application = get_wsgi_application()
