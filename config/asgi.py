"""
ASGI config for the Agency CRM project.

Run with any ASGI server, e.g.:
    uvicorn config.asgi:application
"""
import os

from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

application = get_asgi_application()
