"""Admin console shell: sign-in, mount/unmount, logout and the blocked-device exit"""
import logging
from typing import Callable, Optional

from cafeconsole.client import CafeConsoleClient
from cafeconsole.credentials import CredentialStore
from cafeconsole.device import DeviceGate, DeviceVerdict
from cafeconsole.exceptions import AuthenticationError, ConsoleError
from cafeconsole.models import AdminAccount, Session, SessionScope
from cafeconsole.policy import can_manage_admins
from cafeconsole.presence import HeartbeatChannel, HeartbeatState, RosterView, send_teardown
from cafeconsole.routing import PUBLIC_HOME, RouteDecision, RouteGuard

logger = logging.getLogger(__name__)


class AdminConsole:
    """Owns one console instance (one browser tab's worth of state).

    ``navigate`` is called with a path whenever the console decides to leave
    the current screen (session termination, logout).
    """

    def __init__(
        self,
        client: CafeConsoleClient,
        credentials: CredentialStore,
        device_gate: DeviceGate,
        navigate: Optional[Callable[[str], None]] = None,
    ):
        self.client = client
        self.credentials = credentials
        self.device_gate = device_gate
        self.navigate = navigate or (lambda path: None)
        self.guard = RouteGuard(credentials, device_gate)
        self.heartbeat: Optional[HeartbeatChannel] = None
        self.current_user: Optional[AdminAccount] = None

    # ------------------------------------------------------------------
    # Sign-in
    # ------------------------------------------------------------------

    def sign_in(self, email: str, password: str, remember_me: bool = False) -> Session:
        """Log in and store the session in the scope ``remember_me`` selects.

        Raises whatever :meth:`CafeConsoleClient.login` raises; nothing is
        stored on failure.
        """
        result = self.client.login(email, password, remember_me=remember_me)
        scope = SessionScope.PERSISTENT if remember_me else SessionScope.EPHEMERAL
        session = self.credentials.save(result.token, result.user, scope)
        logger.info("Signed in as %s (%s, %s)", result.user.id, result.user.role, scope.value)
        return session

    def open(self, path: str) -> RouteDecision:
        """Navigation entry point; delegates to the route guard."""
        return self.guard.decide(path)

    # ------------------------------------------------------------------
    # Layout lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> Optional[AdminAccount]:
        """Bring the admin layout up.

        Nothing starts on a blocked device. Otherwise the identity is
        confirmed with ``/auth/me`` and the heartbeat begins. Only a 401/403
        ends the session here; a network failure keeps the cached user.
        """
        if self.device_gate.check().blocked:
            return None
        if self.heartbeat is not None:
            return self.current_user

        session = self.credentials.resolve()
        if session is None:
            self.navigate(PUBLIC_HOME)
            return None

        claims = self.credentials.peek_claims()
        self.current_user = session.user

        try:
            account = self.client.me(session.token)
        except AuthenticationError:
            self._end_session()
            return None
        except ConsoleError as exc:
            logger.debug("Identity check failed, keeping cached user: %s", exc)
        else:
            if claims is not None and not claims.reconcile(account):
                logger.info("Token claims disagree with server record for %s", account.id)
            self.credentials.refresh_user(account)
            self.current_user = account

        self.heartbeat = HeartbeatChannel(
            self.client,
            self.credentials,
            on_terminated=lambda: self.navigate(PUBLIC_HOME),
        )
        self.heartbeat.start()
        return self.current_user

    def unmount(self) -> None:
        if self.heartbeat is not None:
            self.heartbeat.stop()
            self.heartbeat = None

    def unload(self) -> None:
        """Page/tab is going away: fire the teardown beacon and stop timers."""
        send_teardown(self.client, self.credentials)
        self.unmount()

    @property
    def is_live(self) -> bool:
        return self.heartbeat is not None and self.heartbeat.state is HeartbeatState.LIVE

    def device_verdict(self) -> DeviceVerdict:
        return self.device_gate.check()

    def on_resize(self, width: int, height: int) -> DeviceVerdict:
        """Re-run the device gate; a newly blocked console stops its heartbeat."""
        verdict = self.device_gate.on_resize(width, height)
        if verdict.blocked:
            self.unmount()
        return verdict

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def open_roster(self) -> Optional[RosterView]:
        """Open the admin roster if the current role may see it."""
        session = self.credentials.resolve()
        if session is None or not can_manage_admins(session.user.role):
            return None
        view = RosterView(self.client, self.credentials)
        view.open()
        return view

    # ------------------------------------------------------------------
    # Leaving
    # ------------------------------------------------------------------

    def logout(self) -> Optional[str]:
        """Explicit logout.

        Waits for the server, but clears local state whatever the outcome.
        Returns an inline error message when the server call failed.
        """
        error: Optional[str] = None
        session = self.credentials.resolve()
        if session is not None:
            try:
                self.client.logout(session.token)
            except ConsoleError as exc:
                logger.warning("Logout call failed: %s", exc)
                error = "Could not reach the server; you have been signed out on this device."
        self.unmount()
        self._end_session()
        return error

    def leave_blocked_device(self) -> Optional[str]:
        """The one action on the device-blocked screen: log out and go public."""
        return self.logout()

    def _end_session(self) -> None:
        self.credentials.clear()
        self.current_user = None
        self.navigate(PUBLIC_HOME)
