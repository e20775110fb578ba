"""
Application version.

Single source of truth for the version reported by the API and the health
check. Build metadata may be injected through the environment at image build
time.
"""

import os

APP_VERSION = "1.0.0"

BUILD_SHA = os.environ.get("BUILD_SHA", "dev")


def get_full_version() -> str:
    """Version string including the short build SHA when one is set."""
    if BUILD_SHA != "dev":
        return f"{APP_VERSION}+{BUILD_SHA[:8]}"
    return APP_VERSION
