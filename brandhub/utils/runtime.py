"""Runtime environment helpers: DEV_MODE guard and public URLs."""

import os
from typing import Optional, Set
from urllib.parse import urlparse

_LOCAL_HOSTS: Set[str] = {"localhost", "127.0.0.1", "::1"}
DEFAULT_CLIENT_URL = "http://localhost:3000"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() == "true"


def _hostname(url_value: Optional[str]) -> Optional[str]:
    value = (url_value or "").strip()
    if not value:
        return None
    return urlparse(value if "://" in value else f"http://{value}").hostname


def _dev_hosts() -> Set[str]:
    hosts = set(_LOCAL_HOSTS)
    extra = os.getenv("DEV_MODE_ALLOWED_HOSTS", "")
    hosts.update(h.strip().lower() for h in extra.split(",") if h.strip())
    return hosts


def dev_mode_requested() -> bool:
    return _env_flag("DEV_MODE")


def dev_mode_active() -> bool:
    """True when DEV_MODE is on and the deployment is local.

    In dev mode unauthenticated requests act as the local admin
    ``dev@localhost``, so a non-local ``APP_BASE_URL`` is a configuration error.
    """
    if not dev_mode_requested():
        return False

    hostname = _hostname(os.getenv("APP_BASE_URL"))
    if hostname is None:
        if not (_env_flag("ALLOW_DEV_MODE") or os.getenv("PYTEST_CURRENT_TEST")):
            raise RuntimeError(
                "DEV_MODE=true requires APP_BASE_URL to be a localhost URL "
                "or ALLOW_DEV_MODE=true."
            )
        return True

    allowed = _dev_hosts()
    if hostname.lower() not in allowed:
        raise RuntimeError(
            f"DEV_MODE=true is not permitted for host '{hostname}'. Allowed hosts: {sorted(allowed)}"
        )
    return True


def client_url() -> str:
    """Public URL of the web client (OAuth redirects, tool page back links)."""
    return (os.getenv("CLIENT_URL") or os.getenv("APP_BASE_URL") or DEFAULT_CLIENT_URL).rstrip("/")
