"""Route guard: turns session, role and device state into navigation decisions.

Decisions are made from local state only (the credential store and the device
gate). The guard never waits on the network.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from cafeconsole.credentials import CredentialStore
from cafeconsole.device import DeviceGate
from cafeconsole.models import Role
from cafeconsole.policy import is_admin_role, meets_minimum

PUBLIC_HOME = "/"
ADMIN_PREFIX = "/admin"
ADMIN_HOME = "/admin/home"
DEVICE_BLOCKED_SCREEN = "/admin/device-blocked"


@dataclass(frozen=True)
class ScreenRule:
    """Minimum role for one admin screen; None means any admin role."""
    min_role: Optional[Role] = None
    fallback: str = ADMIN_HOME


ADMIN_SCREENS: Dict[str, ScreenRule] = {
    "/admin/home": ScreenRule(),
    "/admin/manage-admins": ScreenRule(Role.OWNER),
    "/admin/menu-management": ScreenRule(Role.MANAGER),
    "/admin/inventory-management": ScreenRule(Role.MANAGER),
    "/admin/reward-management": ScreenRule(),
    "/admin/promo-management": ScreenRule(),
    "/admin/customer-feedback": ScreenRule(),
    "/admin/gallery-management": ScreenRule(Role.STAFF),
}

PUBLIC_ROUTES = frozenset({
    "/",
    "/aboutus",
    "/menu",
    "/gallery",
    "/location",
    "/contactus",
    "/account-settings",
    "/signin",
    "/signup",
})


class Outcome(str, Enum):
    RENDER = "render"
    REDIRECT = "redirect"
    DEVICE_BLOCKED = "device_blocked"


@dataclass(frozen=True)
class RouteDecision:
    outcome: Outcome
    path: str

    @classmethod
    def render(cls, path: str) -> "RouteDecision":
        return cls(Outcome.RENDER, path)

    @classmethod
    def redirect(cls, path: str) -> "RouteDecision":
        return cls(Outcome.REDIRECT, path)


def _normalize(path: str) -> str:
    path = "/" + (path or "").split("?", 1)[0].split("#", 1)[0].strip("/")
    return path


def is_admin_path(path: str) -> bool:
    path = _normalize(path)
    return path == ADMIN_PREFIX or path.startswith(ADMIN_PREFIX + "/")


class RouteGuard:
    """Gate-and-redirect decisions for every navigation.

    Order of evaluation for admin paths:

    1. device gate (a blocked device sees only the block screen)
    2. top split (an admin role is required, else public home)
    3. per-screen minimum role (else the screen's fallback)
    """

    def __init__(self, credentials: CredentialStore, device_gate: Optional[DeviceGate] = None):
        self.credentials = credentials
        self.device_gate = device_gate

    def _admin_role(self) -> Optional[str]:
        session = self.credentials.resolve()
        if session is None or not is_admin_role(session.user.role):
            return None
        return session.user.role

    def decide(self, path: str) -> RouteDecision:
        path = _normalize(path)
        role = self._admin_role()

        if is_admin_path(path):
            return self._decide_admin(path, role)

        if path in PUBLIC_ROUTES:
            if role is not None:
                return RouteDecision.redirect(ADMIN_HOME)
            return RouteDecision.render(path)

        # Unknown public route
        return RouteDecision.redirect(ADMIN_HOME if role is not None else PUBLIC_HOME)

    def _decide_admin(self, path: str, role: Optional[str]) -> RouteDecision:
        if self.device_gate is not None and self.device_gate.check().blocked:
            return RouteDecision(Outcome.DEVICE_BLOCKED, DEVICE_BLOCKED_SCREEN)

        if role is None:
            return RouteDecision.redirect(PUBLIC_HOME)

        rule = ADMIN_SCREENS.get(path)
        if rule is None:
            return RouteDecision.redirect(ADMIN_HOME)

        if rule.min_role is not None and not meets_minimum(role, rule.min_role):
            return RouteDecision.redirect(rule.fallback)
        return RouteDecision.render(path)
