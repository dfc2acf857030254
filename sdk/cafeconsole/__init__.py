"""Cafe console client: admin sessions, presence and role-based access"""
from cafeconsole.client import CafeConsoleClient, LoginResult
from cafeconsole.console import AdminConsole
from cafeconsole.credentials import CredentialStore
from cafeconsole.device import ClientProfile, DeviceClass, DeviceGate, DeviceVerdict, classify
from cafeconsole.exceptions import APIError, AuthenticationError, ConsoleError, NetworkError
from cafeconsole.models import AdminAccount, PresenceStatus, Role, Session, SessionScope, TokenClaims
from cafeconsole.presence import HeartbeatChannel, HeartbeatState, RosterStore, RosterView
from cafeconsole.routing import Outcome, RouteDecision, RouteGuard
from cafeconsole.storage import FileStore, KeyValueStore, MemoryStore

__version__ = "0.1.0"

__all__ = [
    "AdminAccount",
    "AdminConsole",
    "APIError",
    "AuthenticationError",
    "CafeConsoleClient",
    "ClientProfile",
    "ConsoleError",
    "CredentialStore",
    "DeviceClass",
    "DeviceGate",
    "DeviceVerdict",
    "FileStore",
    "HeartbeatChannel",
    "HeartbeatState",
    "KeyValueStore",
    "LoginResult",
    "MemoryStore",
    "NetworkError",
    "Outcome",
    "PresenceStatus",
    "Role",
    "RosterStore",
    "RosterView",
    "RouteDecision",
    "RouteGuard",
    "Session",
    "SessionScope",
    "TokenClaims",
    "classify",
]
