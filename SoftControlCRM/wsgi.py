"""
WSGI config for SoftControlCRM.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "SoftControlCRM.settings.dev")

application = get_wsgi_application()
