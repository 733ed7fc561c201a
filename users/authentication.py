import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from rest_framework.authentication import BaseAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import AccessToken

from backend.exceptions import Unauthenticated
from users.choices import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """The acting user as seen by downstream authorization checks."""

    id: int
    username: str
    email: str
    role: str

    is_authenticated = True
    is_anonymous = False

    @property
    def pk(self):
        return self.id

    @property
    def is_admin(self):
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user):
        return cls(id=user.pk, username=user.username, email=user.email, role=user.role)


class BearerTokenAuthentication(BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request):
        auth_header = request.headers.get("Authorization", "")
        if not auth_header:
            return None  # Lets the permission layer answer with 401

        parts = auth_header.split()
        if len(parts) != 2 or parts[0] != self.keyword:
            raise Unauthenticated("Malformed Authorization header.")

        try:
            token = AccessToken(parts[1])
        except TokenError as e:
            logger.info(f"[Auth] Rejected bearer token: {e}")
            raise Unauthenticated("Invalid or expired token.")

        user_id = token.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            raise Unauthenticated("Token missing user claim.")

        User = get_user_model()
        user = (
            User.objects.filter(pk=user_id, is_active=True)
            .only("id", "username", "email", "role")
            .first()
        )
        if user is None:
            logger.info(f"[Auth] Token references missing user {user_id}")
            raise Unauthenticated("User not found.")

        return (Identity.from_user(user), token)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'
