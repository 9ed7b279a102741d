"""
Token authentication for the staff API.

Clients either send a simplejwt access token (``Authorization: Bearer
<jwt>``) or the long-lived DRF token issued at login
(``Authorization: Token <key>``).  This module holds the latter; it is
kept apart from the login views so that DRF can import it while the
settings are loading.
"""
from __future__ import annotations

from rest_framework import authentication


class TokenAuthentication(authentication.TokenAuthentication):
    """DRF token authentication, reported as ``Token`` in WWW-Authenticate."""

    keyword = 'Token'
