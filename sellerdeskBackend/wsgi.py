"""
WSGI config for sellerdeskBackend project.
"""

import os

from django.core.wsgi import get_wsgi_application


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sellerdeskBackend.settings")

application = get_wsgi_application()
