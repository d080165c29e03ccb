"""Bearer-token authentication against the identity provider's JWTs."""

import jwt
from django.conf import settings
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.request import Request

from eventdesk.domain import Profile
from eventdesk.handlers.dependencies import identity_service

JWT_ALGORITHMS = ["HS256"]


class IdentityUser:
    """Authenticated caller; ``profile`` is the actor every service receives."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, profile: Profile) -> None:
        self.profile = profile

    @property
    def pk(self) -> str:
        return str(self.profile.id)

    def __str__(self) -> str:
        return self.profile.email


class IdentityTokenAuthentication(BaseAuthentication):
    """Authenticate ``Authorization: Bearer <jwt>`` headers.

    The token's ``sub`` claim is the identity id, which is also the profile id.
    Requests without a bearer header stay anonymous.
    """

    keyword = "Bearer"

    def authenticate(self, request: Request) -> tuple[IdentityUser, dict] | None:
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise AuthenticationFailed("Invalid authorization header")
        try:
            token = parts[1].decode()
        except UnicodeError as exc:
            raise AuthenticationFailed("Invalid authorization header") from exc
        return self.authenticate_token(token)

    def authenticate_token(self, token: str) -> tuple[IdentityUser, dict]:
        try:
            claims = jwt.decode(
                token,
                settings.IDENTITY_JWT_SECRET,
                algorithms=JWT_ALGORITHMS,
                audience=settings.IDENTITY_JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationFailed("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthenticationFailed("Invalid token") from exc

        profile = identity_service().resolve_actor(claims.get("sub", ""))
        if profile is None:
            raise AuthenticationFailed("No profile exists for this identity")
        return IdentityUser(profile), claims

    def authenticate_header(self, request: Request) -> str:
        return self.keyword
