"""Presence channel: heartbeats, unload teardown and the live admin roster.

Presence is eventually consistent. A console only learns about other admins
through the roster poll (every 5 s) and the server only learns about this
admin through heartbeats (every 30 s). The unload beacon is a latency
optimisation; the server-side heartbeat timeout is what actually expires a
vanished admin.
"""
import logging
import threading
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

from cafeconsole.client import CafeConsoleClient
from cafeconsole.config import HEARTBEAT_INTERVAL_SECONDS, ROSTER_POLL_INTERVAL_SECONDS
from cafeconsole.credentials import CredentialStore
from cafeconsole.exceptions import AuthenticationError, ConsoleError
from cafeconsole.models import AdminAccount, PresenceStatus

logger = logging.getLogger(__name__)

Roster = Tuple[AdminAccount, ...]


class IntervalTimer:
    """Calls ``fn`` every ``interval`` seconds on a daemon thread until cancelled."""

    def __init__(self, interval: float, fn: Callable[[], None], name: str):
        self.interval = interval
        self._fn = fn
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._stop.set()

    @property
    def cancelled(self) -> bool:
        return self._stop.is_set()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self._fn()


# ---------------------------------------------------------------------------
# Heartbeat
# ---------------------------------------------------------------------------

class HeartbeatState(str, Enum):
    BOOTSTRAPPING = "bootstrapping"
    LIVE = "live"
    TERMINATED = "terminated"


class HeartbeatChannel:
    """Keeps one authenticated session marked active on the server.

    ``start`` sends one heartbeat immediately and then one every
    ``interval`` seconds. A 401/403 terminates the session: both stores are
    cleared and ``on_terminated`` is called (normally a redirect to the public
    site). Every other failure is ignored and retried on the next tick.

    A terminated channel stays terminated; a fresh login gets a new channel.
    """

    def __init__(
        self,
        client: CafeConsoleClient,
        credentials: CredentialStore,
        on_terminated: Optional[Callable[[], None]] = None,
        interval: float = HEARTBEAT_INTERVAL_SECONDS,
    ):
        self.client = client
        self.credentials = credentials
        self.on_terminated = on_terminated
        self.interval = interval
        self.state = HeartbeatState.BOOTSTRAPPING
        self._timer: Optional[IntervalTimer] = None
        self._stopped = False
        self._lock = threading.Lock()

    def start(self) -> None:
        if self.state is HeartbeatState.TERMINATED or self._stopped or self._timer is not None:
            return
        self.beat()
        if self.state is HeartbeatState.TERMINATED:
            return
        self._timer = IntervalTimer(self.interval, self.beat, name="cafeconsole-heartbeat")
        self._timer.start()

    def stop(self) -> None:
        """Tear the timer down; a response still in flight will be discarded."""
        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def beat(self) -> HeartbeatState:
        """Send one heartbeat and apply its outcome."""
        if self.state is HeartbeatState.TERMINATED or self._stopped:
            return self.state
        session = self.credentials.resolve()
        if session is None:
            return self.state

        try:
            self.client.heartbeat(session.token)
        except AuthenticationError as exc:
            if not self._stopped:
                logger.info("Heartbeat rejected (%s); ending session", exc.status_code)
                self._terminate()
            return self.state
        except ConsoleError as exc:
            logger.debug("Heartbeat failed, will retry: %s", exc)

        # Anything short of an auth rejection leaves the session live
        with self._lock:
            if not self._stopped and self.state is HeartbeatState.BOOTSTRAPPING:
                self.state = HeartbeatState.LIVE
        return self.state

    def _terminate(self) -> None:
        with self._lock:
            if self.state is HeartbeatState.TERMINATED:
                return
            self.state = HeartbeatState.TERMINATED
        self.stop()
        self.credentials.clear()
        if self.on_terminated is not None:
            self.on_terminated()


def send_teardown(client: CafeConsoleClient, credentials: CredentialStore) -> bool:
    """Best-effort "mark me inactive" on unload. Returns False when signed out."""
    session = credentials.resolve()
    if session is None:
        return False
    client.send_logout_beacon(session.token)
    return True


# ---------------------------------------------------------------------------
# Roster
# ---------------------------------------------------------------------------

class RosterStore:
    """Owned container for the roster snapshot, with change subscribers.

    Snapshots are replaced wholesale and only when they differ by value from
    the current one, so subscribers fire once per real presence change no
    matter how often the roster is polled.
    """

    def __init__(self, self_id: Optional[str] = None):
        self.self_id = self_id
        self._snapshot: Roster = ()
        self._subscribers: List[Callable[[Roster], None]] = []
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> Roster:
        return self._snapshot

    def subscribe(self, callback: Callable[[Roster], None]) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _pin_self(self, accounts: Iterable[AdminAccount]) -> Roster:
        # The acting admin always sees themselves as active
        return tuple(
            a.with_status(PresenceStatus.ACTIVE) if self.self_id and a.id == self.self_id else a
            for a in accounts
        )

    def apply(self, accounts: Iterable[AdminAccount]) -> bool:
        """Replace the snapshot if it changed. Returns True when subscribers were notified."""
        new = self._pin_self(accounts)
        with self._lock:
            if new == self._snapshot:
                return False
            self._snapshot = new
        for callback in list(self._subscribers):
            callback(new)
        return True

    def mark_self_active(self) -> bool:
        """Optimistically flip the acting admin's own row to active."""
        return self.apply(self._snapshot)


class RosterView:
    """The open admin roster: polls ``GET /admins`` and feeds a :class:`RosterStore`.

    Poll failures of any kind leave the roster as it was; the next tick tries
    again. Responses that land after :meth:`close` are dropped.
    """

    def __init__(
        self,
        client: CafeConsoleClient,
        credentials: CredentialStore,
        store: Optional[RosterStore] = None,
        interval: float = ROSTER_POLL_INTERVAL_SECONDS,
    ):
        self.client = client
        self.credentials = credentials
        self.interval = interval
        session = credentials.resolve()
        self.store = store if store is not None else RosterStore(session.user.id if session else None)
        self._timer: Optional[IntervalTimer] = None
        self._closed = False

    @property
    def is_open(self) -> bool:
        return self._timer is not None

    def open(self) -> None:
        if self._closed or self._timer is not None:
            return
        self.store.mark_self_active()
        self.poll()
        self._timer = IntervalTimer(self.interval, self.poll, name="cafeconsole-roster")
        self._timer.start()

    def close(self) -> None:
        self._closed = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def poll(self) -> bool:
        """Fetch one snapshot and apply it. Returns True if the roster changed."""
        if self._closed:
            return False
        session = self.credentials.resolve()
        if session is None:
            return False
        try:
            accounts = self.client.list_admins(session.token)
        except ConsoleError as exc:
            logger.debug("Roster poll failed, will retry: %s", exc)
            return False
        if self._closed:
            return False
        return self.store.apply(accounts)
