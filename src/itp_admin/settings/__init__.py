"""Settings modules, one per environment, chosen by APP_ENV."""

import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "itp_admin.settings.production"

    if env in {"test", "testing"}:
        return "itp_admin.settings.testing"

    return "itp_admin.settings.development"
