"""Rate limiting configuration for security-sensitive endpoints."""

from ipaddress import ip_address, ip_network
from typing import Sequence

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from muebleria_api.config import get_settings


def _get_trusted_proxies() -> Sequence[str]:
    """Get list of trusted proxy IP ranges from configuration.

    Returns:
        List of IP addresses or CIDR ranges that are trusted proxies.
    """
    settings = get_settings()

    if settings.trusted_proxies_list:
        return settings.trusted_proxies_list

    if settings.environment == "development":
        return ["127.0.0.1", "::1"]

    return []


def _is_trusted_proxy(client_ip: str, trusted_proxies: Sequence[str]) -> bool:
    if not trusted_proxies:
        return False

    try:
        addr = ip_address(client_ip)
        for proxy in trusted_proxies:
            if "/" in proxy:
                if addr in ip_network(proxy, strict=False):
                    return True
            elif addr == ip_address(proxy):
                return True
    except ValueError:
        return False

    return False


def get_real_client_ip(request: Request) -> str:
    """Extract the client IP, honoring X-Forwarded-For only from trusted proxies.

    Args:
        request: The incoming request object.

    Returns:
        The client IP address.
    """
    direct_ip = get_remote_address(request)

    if _is_trusted_proxy(direct_ip, _get_trusted_proxies()):
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            client_ip = forwarded_for.split(",")[0].strip()
            try:
                ip_address(client_ip)
                return client_ip
            except ValueError:
                pass

    return direct_ip


def _get_rate_limit_settings() -> dict[str, str]:
    settings = get_settings()
    return {
        "default": f"{settings.rate_limit_default}/minute",
        "auth_login": f"{settings.rate_limit_auth_login}/minute",
        "auth_password_change": f"{settings.rate_limit_auth_password_change}/minute",
        "account_create": f"{settings.rate_limit_account_create}/minute",
    }


_rate_limits = _get_rate_limit_settings()

# In-memory storage; each worker process keeps its own counters
limiter = Limiter(
    key_func=get_real_client_ip,
    default_limits=[_rate_limits["default"]],
    enabled=get_settings().rate_limit_enabled,
)

AUTH_LOGIN_LIMIT = _rate_limits["auth_login"]
AUTH_PASSWORD_CHANGE_LIMIT = _rate_limits["auth_password_change"]
ACCOUNT_CREATE_LIMIT = _rate_limits["account_create"]
API_DEFAULT_LIMIT = _rate_limits["default"]
