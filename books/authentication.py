import logging

from graphql_jwt.exceptions import JSONWebTokenError
from graphql_jwt.settings import jwt_settings
from graphql_jwt.shortcuts import get_user_by_token
from rest_framework import authentication, exceptions

logger = logging.getLogger(__name__)


class JSONWebTokenAuthentication(authentication.BaseAuthentication):
    """
    Authenticates REST requests with the same token the GraphQL endpoint
    issues, sent as ``Authorization: JWT <token>``.
    """

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        prefix = jwt_settings.JWT_AUTH_HEADER_PREFIX.lower().encode()

        if not auth or auth[0].lower() != prefix:
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed('Invalid Authorization header. Expected "JWT <token>".')

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid token header.')

        try:
            user = get_user_by_token(token)
        except JSONWebTokenError as exc:
            logger.info("Rejected JWT: %s", exc)
            raise exceptions.AuthenticationFailed(str(exc))

        return user, token

    def authenticate_header(self, request):
        return jwt_settings.JWT_AUTH_HEADER_PREFIX
