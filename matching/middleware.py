from urllib.parse import parse_qs

from channels.auth import AuthMiddlewareStack
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser, User
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken


def raw_token(scope):
    """Access token from `?token=` or an `Authorization: Bearer` header."""
    query = parse_qs(scope.get('query_string', b'').decode())
    if query.get('token'):
        return query['token'][0]
    for name, value in scope.get('headers', []):
        if name.lower() == b'authorization':
            scheme, _, token = value.decode().partition(' ')
            if scheme.lower() == 'bearer' and token.strip():
                return token.strip()
    return None


@database_sync_to_async
def user_for_token(token):
    try:
        access = AccessToken(token)
        user_id = access[api_settings.USER_ID_CLAIM]
    except (TokenError, KeyError):
        return AnonymousUser()
    return User.objects.filter(pk=user_id, is_active=True).first() or AnonymousUser()


class JWTAuthMiddleware(BaseMiddleware):
    """
    Websocket counterpart of JWTAuthentication. A connection that presents a
    token gets the token's user (anonymous when the token is bad); without a
    token the session user from AuthMiddlewareStack stays in place.
    """

    async def __call__(self, scope, receive, send):
        token = raw_token(scope)
        if token:
            scope = dict(scope, user=await user_for_token(token))
        return await super().__call__(scope, receive, send)


def JWTAuthMiddlewareStack(inner):
    return AuthMiddlewareStack(JWTAuthMiddleware(inner))
