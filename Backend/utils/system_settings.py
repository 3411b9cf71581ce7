from dataclasses import dataclass

DEFAULT_SETTINGS = {
    "maintenanceMode": False,
    "serverPassword": "",
    "requirePassword": True,
    "requireCaptcha": True,
}


@dataclass(frozen=True)
class SystemSettings:
    maintenance_mode: bool = False
    server_password: str = ""
    require_password: bool = True
    require_captcha: bool = True

    @property
    def password_required(self) -> bool:
        # An empty secret never locks anyone out.
        return self.require_password and self.server_password != ""

    def public_view(self) -> dict:
        """Settings a caller may see without a credential. Never includes the password."""
        return {
            "maintenanceMode": self.maintenance_mode,
            "requirePassword": self.password_required,
            "requireCaptcha": self.require_captcha,
        }


def normalize_settings(document) -> SystemSettings:
    """Resolve ``systemSettings`` of a loaded document, falling back to defaults."""
    raw = document.get("systemSettings") if isinstance(document, dict) else None
    if not isinstance(raw, dict):
        raw = {}

    password = raw.get("serverPassword")
    if password is None:
        password = ""
    elif not isinstance(password, str):
        password = str(password)

    return SystemSettings(
        maintenance_mode=raw.get("maintenanceMode") is True,
        server_password=password,
        require_password=raw.get("requirePassword") is not False,
        require_captcha=raw.get("requireCaptcha") is not False,
    )
