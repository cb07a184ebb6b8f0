from __future__ import annotations

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS
from ..core.exceptions import AuthenticationError

_SALT = "hr-portal-auth"


class TokenSigner:
    """Signs and verifies bearer tokens carrying an employee id."""

    def __init__(self, secret_key: str, *, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        if not secret_key:
            raise ValueError("secret_key is required to sign tokens")
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_SALT)
        self._max_age = int(max_age_seconds)

    def issue(self, employee_id: int) -> str:
        return self._serializer.dumps({"employee_id": int(employee_id)})

    def verify(self, token: str) -> int:
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Token has expired")
        except BadSignature:
            raise AuthenticationError("Invalid token")

        try:
            return int(payload["employee_id"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
