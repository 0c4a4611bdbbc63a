from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends, Header, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from golftrack.core.auth import (
    Identity,
    JwksCache,
    bearer_token,
    identity_from_claims,
    verify_token,
)
from golftrack.core.settings import settings
from golftrack.models.player import Player

DEV_USER = "dev-user"


def get_db(request: Request) -> Generator[Session, None, None]:
    # The session factory is owned by the application lifespan (see golftrack.main).
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@lru_cache
def _jwks_for(domain: str) -> JwksCache:
    return JwksCache(domain)


def get_jwks() -> JwksCache | None:
    if not (settings.AUTH0_DOMAIN and settings.AUTH0_AUDIENCE):
        return None
    return _jwks_for(settings.AUTH0_DOMAIN)


def get_identity(
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
    jwks: JwksCache | None = Depends(get_jwks),
) -> Identity:
    # Without Auth0 configured, trust X-User-Id (local dev and tests).
    if jwks is None:
        return Identity(subject=(x_user_id or "").strip() or DEV_USER)

    claims = verify_token(bearer_token(authorization), jwks, audience=settings.AUTH0_AUDIENCE)
    return identity_from_claims(claims)


def ensure_player(db: Session, identity: Identity) -> Player:
    """Load the caller's player row, creating it on first sight.

    A name from the token fills an empty profile name but never overwrites
    one the player set through PATCH /players/me.
    """
    player = db.execute(
        select(Player).where(Player.external_id == identity.subject)
    ).scalars().one_or_none()

    if player is None:
        player = Player(external_id=identity.subject, name=identity.name)
        db.add(player)
        db.flush()
    elif player.name is None and identity.name:
        player.name = identity.name
        db.flush()

    return player


def get_current_player(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
) -> Player:
    return ensure_player(db, identity)
