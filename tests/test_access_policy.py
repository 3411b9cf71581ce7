import logging

import pytest

from auth.access_policy import authorize, is_authorized
from utils.errors import AuthorizationError
from utils.system_settings import SystemSettings, normalize_settings


def test_normalize_missing_settings_uses_defaults():
    settings = normalize_settings({"users": []})
    assert settings == SystemSettings()
    assert settings.maintenance_mode is False
    assert settings.require_password is True
    assert settings.require_captcha is True
    assert settings.server_password == ""


@pytest.mark.parametrize("raw", [None, [], "on", 3])
def test_normalize_non_object_settings(raw):
    assert normalize_settings({"systemSettings": raw}) == SystemSettings()


def test_normalize_only_literal_false_disables_flags():
    settings = normalize_settings(
        {"systemSettings": {"requirePassword": 0, "requireCaptcha": None, "maintenanceMode": "yes"}}
    )
    assert settings.require_password is True
    assert settings.require_captcha is True
    assert settings.maintenance_mode is False

    settings = normalize_settings({"systemSettings": {"requirePassword": False, "requireCaptcha": False}})
    assert settings.require_password is False
    assert settings.require_captcha is False


def test_normalize_password_types():
    assert normalize_settings({"systemSettings": {"serverPassword": None}}).server_password == ""
    assert normalize_settings({"systemSettings": {"serverPassword": 1234}}).server_password == "1234"


def test_empty_password_is_never_required():
    settings = SystemSettings(server_password="", require_password=True)
    assert settings.password_required is False
    assert settings.public_view()["requirePassword"] is False


def test_public_view_hides_password():
    view = SystemSettings(server_password="hunter2", maintenance_mode=True).public_view()
    assert view == {"maintenanceMode": True, "requirePassword": True, "requireCaptcha": True}
    assert "hunter2" not in repr(view)


@pytest.mark.parametrize(
    "settings, credential, expected",
    [
        (SystemSettings(), None, True),
        (SystemSettings(server_password="secret", require_password=False), None, True),
        (SystemSettings(server_password="secret"), None, False),
        (SystemSettings(server_password="secret"), "", False),
        (SystemSettings(server_password="secret"), "wrong", False),
        (SystemSettings(server_password="secret"), "SECRET", False),
        (SystemSettings(server_password="secret"), "secret ", False),
        (SystemSettings(server_password="secret"), "secret", True),
    ],
)
def test_is_authorized(settings, credential, expected):
    assert is_authorized(settings, credential) is expected


def test_maintenance_mode_does_not_block_access():
    settings = SystemSettings(maintenance_mode=True)
    assert is_authorized(settings, None) is True


def test_authorize_raises_and_logs_without_credential(caplog):
    settings = SystemSettings(server_password="secret")

    with caplog.at_level(logging.WARNING, logger="auth.access_policy"):
        with pytest.raises(AuthorizationError) as excinfo:
            authorize(settings, "guess", path="/api/database", remote_addr="10.0.0.7")

    assert excinfo.value.status_code == 401
    assert "/api/database" in caplog.text
    assert "guess" not in caplog.text
    assert "secret" not in caplog.text
