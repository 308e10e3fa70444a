"""
Scoped, expiring tokens.

A token is 32 random bytes, URL-safe base64 encoded (43 characters). Only
the SHA-256 of that plaintext is stored; the plaintext goes back to the
caller once, when the token is created.
"""
import hashlib
import secrets
from datetime import timedelta

from sqlalchemy import delete
from sqlmodel import Session, select

from core.errors import RecordNotFoundError
from core.validator import Validator
from database.models import Token, TokenScope, User
from database.models.timestamps import utc_now
from database.store import storage_errors

TOKEN_BYTES = 32
TOKEN_PLAINTEXT_LENGTH = 43  # len(base64url(32 bytes)) without padding


def hash_token(plaintext: str) -> str:
    return hashlib.sha256(plaintext.encode("utf-8")).hexdigest()


def generate_token(user_id: int, ttl: timedelta, scope: TokenScope | str) -> tuple[str, Token]:
    """Create a new token for ``user_id``. Returns (plaintext, unsaved Token row)."""
    plaintext = secrets.token_urlsafe(TOKEN_BYTES)
    token = Token(
        hash=hash_token(plaintext),
        user_id=user_id,
        expiry=utc_now() + ttl,
        scope=TokenScope(scope).value,
    )
    return plaintext, token


def validate_token_plaintext(v: Validator, plaintext: str) -> None:
    v.check(plaintext != "", "token", "must be provided")
    v.check(len(plaintext) == TOKEN_PLAINTEXT_LENGTH, "token", f"must be {TOKEN_PLAINTEXT_LENGTH} characters long")


class TokenStore:
    def __init__(self, session: Session):
        self.session = session

    def new(self, user_id: int, ttl: timedelta, scope: TokenScope | str) -> tuple[str, Token]:
        plaintext, token = generate_token(user_id, ttl, scope)
        self.insert(token)
        return plaintext, token

    def insert(self, token: Token) -> None:
        with storage_errors(self.session):
            self.session.add(token)
            self.session.commit()
            self.session.refresh(token)
            self.session.expunge(token)

    def get_user_for_token(self, scope: TokenScope | str, plaintext: str) -> User:
        """
        Resolve a plaintext token to its owner.

        Wrong, expired and wrong-scope tokens all raise RecordNotFoundError so
        callers cannot tell them apart.
        """
        query = (
            select(User)
            .join(Token, Token.user_id == User.id)
            .where(
                Token.hash == hash_token(plaintext),
                Token.scope == TokenScope(scope).value,
                Token.expiry > utc_now(),
            )
        )

        with storage_errors(self.session):
            user = self.session.exec(query).first()
            if user is not None:
                self.session.expunge(user)
            self.session.rollback()

        if user is None:
            raise RecordNotFoundError()
        return user

    def delete_all_for_user(self, scope: TokenScope | str, user_id: int) -> None:
        """Revoke every token of ``scope`` held by ``user_id``. A no-op when there are none."""
        with storage_errors(self.session):
            self.session.execute(
                delete(Token)
                .where(Token.scope == TokenScope(scope).value, Token.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            self.session.commit()
