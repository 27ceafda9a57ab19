"""Identity gate.

The bureau does not manage credentials; it only asks an identity provider
whether a bearer token belongs to a user. The built-in provider accepts the
tokens listed in settings.auth_tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import hmac
from typing import Iterable, Optional, Protocol


@dataclass(frozen=True)
class AuthStatus:
    authenticated: bool
    user: Optional[dict] = None


class IdentityProvider(Protocol):
    def is_authenticated(self, credential: Optional[str]) -> AuthStatus: ...


def bearer_token(header: Optional[str]) -> Optional[str]:
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class StaticTokenIdentity:
    def __init__(self, tokens: Iterable[str]):
        self._tokens = [t for t in tokens if t]

    def is_authenticated(self, credential: Optional[str]) -> AuthStatus:
        if not credential:
            return AuthStatus(authenticated=False)
        for token in self._tokens:
            if hmac.compare_digest(token, credential):
                user_id = hashlib.sha256(token.encode()).hexdigest()[:12]
                return AuthStatus(authenticated=True, user={"id": user_id})
        return AuthStatus(authenticated=False)
