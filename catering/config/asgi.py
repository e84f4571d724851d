"""
ASGI config for the catering back-office.

HTTP is served by Django; websockets carry live order updates to the admin
inbox.
"""

import os

from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import AllowedHostsOriginValidator
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

django_asgi_app = get_asgi_application()

from apps.core.middleware import TokenAuthMiddleware
from apps.orders.routing import websocket_urlpatterns as order_websocket_urlpatterns

ws_urlpatterns = [
    *order_websocket_urlpatterns,
]

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": AllowedHostsOriginValidator(
            TokenAuthMiddleware(URLRouter(ws_urlpatterns))
        ),
    }
)
