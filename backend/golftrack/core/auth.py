"""Auth0 access token verification.

``JwksCache`` owns fetching and caching the tenant's signing keys; the
functions below turn an ``Authorization`` header into an ``Identity``.
Nothing here touches the database.
"""

import json
import time
import urllib.request

from jose import jwt
from jose.exceptions import JWTError
from pydantic import BaseModel

from golftrack.core.errors import AuthenticationError

JWKS_TTL_SECONDS = 3600


class Identity(BaseModel):
    subject: str
    name: str | None = None


class JwksCache:
    def __init__(self, domain: str, ttl: float = JWKS_TTL_SECONDS):
        self.domain = domain
        self.ttl = ttl
        self._keys: list[dict] = []
        self._expires_at = 0.0

    @property
    def url(self) -> str:
        return f"https://{self.domain}/.well-known/jwks.json"

    def fetch(self) -> dict:
        with urllib.request.urlopen(self.url, timeout=5) as resp:
            return json.loads(resp.read().decode("utf-8"))

    def refresh(self) -> list[dict]:
        self._keys = self.fetch().get("keys", [])
        self._expires_at = time.time() + self.ttl
        return self._keys

    def keys(self) -> list[dict]:
        if not self._keys or time.time() >= self._expires_at:
            return self.refresh()
        return self._keys

    def signing_key(self, kid: str | None) -> dict:
        key = next((k for k in self.keys() if k.get("kid") == kid), None)
        if key is None:
            # Auth0 may have rotated keys since the last fetch.
            key = next((k for k in self.refresh() if k.get("kid") == kid), None)
        if key is None:
            raise AuthenticationError("Unable to find signing key")
        return key


def bearer_token(authorization: str | None) -> str:
    if not authorization:
        raise AuthenticationError("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthenticationError("Invalid Authorization header")
    return parts[1]


def verify_token(token: str, jwks: JwksCache, *, audience: str) -> dict:
    try:
        kid = jwt.get_unverified_header(token).get("kid")
        return jwt.decode(
            token,
            jwks.signing_key(kid),
            algorithms=["RS256"],
            audience=audience,
            issuer=f"https://{jwks.domain}/",
        )
    except JWTError:
        raise AuthenticationError("Invalid token")


def identity_from_claims(claims: dict) -> Identity:
    sub = claims.get("sub")
    if not sub:
        raise AuthenticationError("Token missing sub")
    name = (claims.get("name") or "").strip() or None
    return Identity(subject=str(sub), name=name)
