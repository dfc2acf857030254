"""Device gate: keeps phones and undersized viewports out of the admin console.

This is product policy, not a layout hint. There is no override: the only way
out of a blocked console is logout.
"""
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

MIN_CONSOLE_WIDTH = 1024
COMPACT_MAX_HEIGHT = 768

MOBILE_UA_PATTERN = re.compile(
    r"Android|webOS|iPhone|iPod|BlackBerry|IEMobile|Opera Mini|Mobile|CriOS|FxiOS|EdgiOS",
    re.IGNORECASE,
)
# Android without a "Mobile" token is a tablet build
TABLET_UA_PATTERN = re.compile(r"iPad|Tablet|Android(?!.*Mobile)", re.IGNORECASE)


class DeviceClass(str, Enum):
    PHONE = "phone"
    TABLET = "tablet"
    DESKTOP = "desktop"


class BlockReason(str, Enum):
    PHONE = "phone"
    VIEWPORT_TOO_NARROW = "viewport_too_narrow"


@dataclass(frozen=True)
class ClientProfile:
    """What the console knows about the device it is running on."""
    user_agent: str
    viewport_width: int
    viewport_height: int
    has_touch: bool = False


@dataclass(frozen=True)
class DeviceVerdict:
    device_class: DeviceClass
    blocked: bool
    reason: Optional[BlockReason] = None

    @property
    def is_phone(self) -> bool:
        return self.device_class is DeviceClass.PHONE


def classify(profile: ClientProfile) -> DeviceVerdict:
    """Combine UA, viewport and touch signals into a verdict. Never raises."""
    ua = profile.user_agent or ""
    is_tablet_ua = bool(TABLET_UA_PATTERN.search(ua))
    is_mobile_ua = bool(MOBILE_UA_PATTERN.search(ua)) and not is_tablet_ua

    compact_touch = (
        profile.has_touch
        and profile.viewport_width < MIN_CONSOLE_WIDTH
        and profile.viewport_height <= COMPACT_MAX_HEIGHT
    )
    phone_signal = is_mobile_ua or compact_touch

    if phone_signal and not is_tablet_ua:
        return DeviceVerdict(DeviceClass.PHONE, blocked=True, reason=BlockReason.PHONE)

    device_class = DeviceClass.TABLET if (is_tablet_ua or profile.has_touch) else DeviceClass.DESKTOP
    if profile.viewport_width < MIN_CONSOLE_WIDTH:
        return DeviceVerdict(device_class, blocked=True, reason=BlockReason.VIEWPORT_TOO_NARROW)
    return DeviceVerdict(device_class, blocked=False)


class DeviceGate:
    """Holds the live client profile and re-classifies on every check.

    Nothing is cached across a resize: a window shrunk below the threshold is
    blocked on the very next :meth:`check`.
    """

    def __init__(self, profile: ClientProfile):
        self._profile = profile

    @property
    def profile(self) -> ClientProfile:
        return self._profile

    def on_resize(self, width: int, height: int) -> DeviceVerdict:
        self._profile = replace(self._profile, viewport_width=width, viewport_height=height)
        return self.check()

    def check(self) -> DeviceVerdict:
        return classify(self._profile)

    @property
    def is_blocked(self) -> bool:
        return self.check().blocked
