"""Identity Parser — resolves the current user from a signed session cookie.

Invariants:
    - Returns None for missing, malformed, expired or forged cookies (never raises)
    - The cookie carries only the user id and a timestamp, signed with itsdangerous;
      the user's password hash salts the signature, so changing the password
      invalidates every outstanding cookie
    - Passwords are stored as salted bcrypt hashes, never as plain digests

Design Decisions:
    - IdentityParser is a Protocol: the pipeline only needs `await parser(request)`,
      tests inject plain async functions
    - UserStore is a Protocol with an in-memory implementation; persistent
      storage sits outside this service
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Protocol

import bcrypt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from starlette.requests import Request

from transwarp.core.roles import Identity

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12
SESSION_MAX_AGE = 7 * 24 * 3600


class IdentityParser(Protocol):
    async def __call__(self, request: Request) -> Identity | None: ...


@dataclass(frozen=True)
class StoredUser:
    identity: Identity
    password_hash: str


class UserStore(Protocol):
    async def get(self, user_id: str) -> StoredUser | None: ...

    async def find_by_email(self, email: str) -> StoredUser | None: ...


class InMemoryUserStore:
    """UserStore backed by a dict, filled at startup."""

    def __init__(self, users: Iterable[StoredUser] = ()):
        self._users = {u.identity.id: u for u in users}

    def add(self, user: StoredUser) -> None:
        self._users[user.identity.id] = user

    async def get(self, user_id: str) -> StoredUser | None:
        return self._users.get(user_id)

    async def find_by_email(self, email: str) -> StoredUser | None:
        email = email.strip().lower()
        for user in self._users.values():
            if user.identity.email.lower() == email:
                return user
        return None


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """bcrypt hash ($2b$...) with a fresh random salt per call."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def check_password(user: StoredUser, password: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8"), user.password_hash.encode("utf-8"),
        )
    except ValueError:
        # Malformed stored hash or over-long password
        return False


def _serializer(secret: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret, salt="transwarp.session")


def make_session_cookie(user: StoredUser, secret: str) -> str:
    """Signed, timestamped cookie value holding the user id."""
    return _serializer(secret).dumps(user.identity.id, salt=user.password_hash)


class CookieIdentityParser:
    """Default IdentityParser: session cookie → StoredUser → Identity."""

    def __init__(
        self,
        store: UserStore,
        secret: str,
        cookie_name: str,
        max_age: int = SESSION_MAX_AGE,
    ):
        self._store = store
        self._serializer = _serializer(secret)
        self._cookie_name = cookie_name
        self._max_age = max_age

    async def __call__(self, request: Request) -> Identity | None:
        value = request.cookies.get(self._cookie_name)
        if not value:
            return None
        # The signature depends on the user's password hash, so the id is read
        # first and only trusted once loads() has verified it
        _, user_id = self._serializer.loads_unsafe(value)
        if not isinstance(user_id, str):
            logger.debug(f"Malformed session cookie on {request.url.path}")
            return None
        user = await self._store.get(user_id)
        if user is None:
            return None
        try:
            self._serializer.loads(value, max_age=self._max_age, salt=user.password_hash)
        except SignatureExpired:
            return None
        except BadSignature:
            logger.warning(f"Invalid session signature for user {user_id}")
            return None
        return user.identity
