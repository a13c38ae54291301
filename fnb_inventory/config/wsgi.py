"""
WSGI config for the F&B inventory management API.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'fnb_inventory.config.settings')

application = get_wsgi_application()
