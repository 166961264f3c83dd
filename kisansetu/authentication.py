from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from .jwt_utils import get_user_id_from_token


class TokenUser:
    """Lightweight principal for a request authenticated by a bearer token.

    The User record itself belongs to the users app and may not exist yet;
    views only ever need the id.
    """

    is_authenticated = True
    is_anonymous = False

    def __init__(self, user_id):
        self.user_id = user_id
        self.pk = user_id

    def __str__(self):
        return self.user_id


class JWTAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        """
        Authenticate a request using a JWT provided in the Authorization header.

        Requests without an Authorization header are left anonymous so that
        public endpoints keep working; permission classes decide whether that
        is acceptable. On success the token subject is attached to
        ``request.user_id``.

        Raises:
            AuthenticationFailed: If the header is not in "Bearer <token>"
            format, or if token verification fails.
        """
        auth = get_authorization_header(request).split()
        if not auth:
            return None

        if auth[0].decode().lower() != self.keyword.lower() or len(auth) != 2:
            raise exceptions.AuthenticationFailed("Wrong token format. Expected 'Bearer token'")

        user_id = get_user_id_from_token(auth[1].decode())
        if not user_id:
            raise exceptions.AuthenticationFailed("Invalid or expired token")

        request.user_id = user_id
        return (TokenUser(user_id), None)

    def authenticate_header(self, request):
        return self.keyword
