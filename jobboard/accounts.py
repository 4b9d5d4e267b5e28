"""
Server-side accounts and login sessions.

Credentials are kept as :Account nodes holding a salted PBKDF2 hash, and
each login creates a :Session node carrying an opaque token. Job routes do
not check sessions; the board page uses them to decide which actions to
offer.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Optional

from neo4j import AsyncSession

from .models import SessionInfo

logger = logging.getLogger(__name__)

HASH_NAME = "sha256"
HASH_ITERATIONS = 240_000


def hash_password(password: str, salt: Optional[bytes] = None) -> str:
    """Return `iterations$salt_hex$digest_hex` for a password."""
    salt = salt if salt is not None else secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(HASH_NAME, password.encode(), salt, HASH_ITERATIONS)
    return f"{HASH_ITERATIONS}${salt.hex()}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    try:
        iterations, salt_hex, digest_hex = encoded.split("$")
        digest = hashlib.pbkdf2_hmac(
            HASH_NAME, password.encode(), bytes.fromhex(salt_hex), int(iterations)
        )
    except ValueError:
        logger.warning("Malformed password hash encountered")
        return False
    return hmac.compare_digest(digest.hex(), digest_hex)


class AccountStore:
    """Accounts and sessions stored in Neo4j."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def signup(self, username: str, password: str) -> None:
        """
        Store a credential pair keyed by username.

        A second signup with the same username replaces the stored password
        and revokes that user's open sessions.
        """
        query = """
        MERGE (a:Account {username: $username})
        ON CREATE SET a.created_at = timestamp()
        SET a.password_hash = $password_hash
        WITH a
        OPTIONAL MATCH (s:Session {username: $username})
        DETACH DELETE s
        """
        result = await self.session.run(
            query, username=username, password_hash=hash_password(password)
        )
        await result.consume()
        logger.info("Stored credentials for %s", username)

    async def login(self, username: str, password: str) -> Optional[SessionInfo]:
        """Open a session when the pair matches a stored account."""
        result = await self.session.run(
            "MATCH (a:Account {username: $username}) RETURN a.password_hash AS hash",
            username=username,
        )
        record = await result.single()
        if record is None or not verify_password(password, record["hash"]):
            logger.info("Rejected login for %s", username)
            return None

        token = secrets.token_urlsafe(32)
        result = await self.session.run(
            "CREATE (:Session {token: $token, username: $username, created_at: timestamp()})",
            token=token,
            username=username,
        )
        await result.consume()
        return SessionInfo(username=username, token=token)

    async def logout(self, token: str) -> None:
        result = await self.session.run(
            "MATCH (s:Session {token: $token}) DETACH DELETE s", token=token
        )
        await result.consume()

    async def current(self, token: str) -> Optional[str]:
        """Username owning a session token, or None."""
        result = await self.session.run(
            "MATCH (s:Session {token: $token}) RETURN s.username AS username",
            token=token,
        )
        record = await result.single()
        return record["username"] if record is not None else None
