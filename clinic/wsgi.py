"""
WSGI entrypoint for the clinic backend.

Plain HTTP deployments (gunicorn, uwsgi) load ``application`` from
here.  WebSocket queue updates need the ASGI entrypoint in
``clinic.asgi`` instead.
"""
import os

from django.core.wsgi import get_wsgi_application  # type: ignore

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'clinic.settings')

application = get_wsgi_application()
