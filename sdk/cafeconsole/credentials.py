"""Credential store: one canonical session out of two scoped stores"""
import json
import logging
import threading
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from cafeconsole.config import settings
from cafeconsole.models import AdminAccount, Session, SessionScope, TokenClaims
from cafeconsole.storage import FileStore, KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


def _read_user(store: KeyValueStore) -> Dict[str, Any]:
    """Stored user object, or {} when absent or malformed."""
    raw = store.get(USER_KEY)
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _is_populated(user: Dict[str, Any]) -> bool:
    return any(value not in (None, "", [], {}) for value in user.values())


class CredentialStore:
    """Resolves the effective session from a persistent and an ephemeral store.

    When both stores hold a session, the ephemeral one wins: it represents the
    most recent explicit login in this tab.
    """

    def __init__(
        self,
        persistent: Optional[KeyValueStore] = None,
        ephemeral: Optional[KeyValueStore] = None,
    ):
        self.persistent = persistent if persistent is not None else FileStore(settings.CAFE_SESSION_FILE)
        self.ephemeral = ephemeral if ephemeral is not None else MemoryStore()
        self._write_lock = threading.Lock()

    def _store(self, scope: SessionScope) -> KeyValueStore:
        return self.persistent if scope is SessionScope.PERSISTENT else self.ephemeral

    def _read_scope(self, scope: SessionScope) -> Optional[Session]:
        store = self._store(scope)
        token = store.get(TOKEN_KEY)
        user = _read_user(store)
        if not token or not _is_populated(user):
            return None
        try:
            account = AdminAccount.model_validate(user)
        except ValidationError:
            return None
        return Session(token=token, user=account, scope=scope)

    def resolve(self) -> Optional[Session]:
        """Return the effective session, or None.

        Pure read: no network I/O and nothing is written, so it is safe to call
        on every navigation.
        """
        return self._read_scope(SessionScope.EPHEMERAL) or self._read_scope(SessionScope.PERSISTENT)

    def resolve_pair(self) -> Tuple[Optional[str], Optional[AdminAccount]]:
        """``(token, user)`` form of :meth:`resolve`; ``(None, None)`` when signed out."""
        session = self.resolve()
        if session is None:
            return None, None
        return session.token, session.user

    def save(self, token: str, user: AdminAccount, scope: SessionScope) -> Session:
        """Store a fresh login in ``scope`` and wipe the other scope."""
        other = SessionScope.EPHEMERAL if scope is SessionScope.PERSISTENT else SessionScope.PERSISTENT
        with self._write_lock:
            self._wipe(self._store(other))
            store = self._store(scope)
            store.set(TOKEN_KEY, token)
            store.set(USER_KEY, user.model_dump_json())
        return Session(token=token, user=user, scope=scope)

    def refresh_user(self, user: AdminAccount) -> Optional[Session]:
        """Replace the cached user snapshot in whichever scope is active."""
        session = self.resolve()
        if session is None:
            return None
        with self._write_lock:
            self._store(session.scope).set(USER_KEY, user.model_dump_json())
        return session._replace(user=user)

    def clear(self) -> None:
        """Remove session data from both stores. Idempotent."""
        with self._write_lock:
            self._wipe(self.persistent)
            self._wipe(self.ephemeral)

    def peek_claims(self) -> Optional[TokenClaims]:
        """Unverified claims of the resolved token, for optimistic display only."""
        session = self.resolve()
        if session is None:
            return None
        return TokenClaims.decode(session.token)

    @staticmethod
    def _wipe(store: KeyValueStore) -> None:
        store.remove(TOKEN_KEY)
        store.remove(USER_KEY)
