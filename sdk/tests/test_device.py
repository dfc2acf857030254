"""Tests for the device gate"""
import pytest

from cafeconsole.device import (
    BlockReason,
    ClientProfile,
    DeviceClass,
    DeviceGate,
    classify,
)

DESKTOP_UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/605.1.15"
IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
IPAD_UA = "Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
ANDROID_PHONE_UA = "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Mobile Safari/537.36"
ANDROID_TABLET_UA = "Mozilla/5.0 (Linux; Android 13; SM-X710) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36"


def test_desktop_at_1280_allowed():
    verdict = classify(ClientProfile(DESKTOP_UA, 1280, 800))
    assert verdict.device_class is DeviceClass.DESKTOP
    assert not verdict.blocked
    assert verdict.reason is None


@pytest.mark.parametrize("width", [320, 800, 1024, 1440, 2560])
@pytest.mark.parametrize("ua", [IPHONE_UA, ANDROID_PHONE_UA])
def test_phone_blocked_at_any_width(ua, width):
    """Test that a phone user agent is blocked however wide it claims to be"""
    verdict = classify(ClientProfile(ua, width, 900, has_touch=True))
    assert verdict.blocked
    assert verdict.is_phone
    assert verdict.reason is BlockReason.PHONE


@pytest.mark.parametrize("ua", [IPAD_UA, ANDROID_TABLET_UA])
def test_tablet_at_1024_allowed(ua):
    verdict = classify(ClientProfile(ua, 1024, 768, has_touch=True))
    assert verdict.device_class is DeviceClass.TABLET
    assert not verdict.blocked


@pytest.mark.parametrize("ua", [IPAD_UA, ANDROID_TABLET_UA])
def test_tablet_at_800_blocked_on_size(ua):
    verdict = classify(ClientProfile(ua, 800, 1280, has_touch=True))
    assert verdict.blocked
    assert not verdict.is_phone
    assert verdict.reason is BlockReason.VIEWPORT_TOO_NARROW


def test_narrow_desktop_window_blocked_on_size():
    verdict = classify(ClientProfile(DESKTOP_UA, 900, 1000))
    assert verdict.blocked
    assert verdict.device_class is DeviceClass.DESKTOP
    assert verdict.reason is BlockReason.VIEWPORT_TOO_NARROW


def test_compact_touch_screen_is_phone():
    """A desktop-looking UA on a small touch screen counts as a phone"""
    verdict = classify(ClientProfile(DESKTOP_UA, 412, 732, has_touch=True))
    assert verdict.is_phone
    assert verdict.reason is BlockReason.PHONE


def test_touch_laptop_allowed():
    verdict = classify(ClientProfile(DESKTOP_UA, 1366, 768, has_touch=True))
    assert not verdict.blocked


def test_missing_user_agent_never_raises():
    verdict = classify(ClientProfile("", 1280, 800))
    assert not verdict.blocked
    assert classify(ClientProfile(None, 600, 800)).blocked


def test_gate_reevaluates_on_resize():
    gate = DeviceGate(ClientProfile(DESKTOP_UA, 1280, 800))
    assert not gate.is_blocked

    verdict = gate.on_resize(1000, 800)
    assert verdict.blocked
    assert gate.is_blocked
    assert gate.profile.viewport_width == 1000

    assert not gate.on_resize(1024, 800).blocked
