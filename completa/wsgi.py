"""
WSGI config para o projeto Completa.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'completa.settings')

application = get_wsgi_application()
