"""Security event logging for sensitive operations.

Authentication attempts, schedule denials, password changes, account
lifecycle changes and catalog edits go to a dedicated ``security`` logger so
they can be routed separately from application logs.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID


class SecurityEventType(str, Enum):
    """Types of security events that are logged."""

    # Authentication events
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_LOCKED = "login_locked"
    STALE_TOKEN = "stale_token"
    ACCESS_WINDOW_DENIED = "access_window_denied"

    # Account management
    ACCOUNT_CREATED = "account_created"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"
    ACCOUNT_RESTORED = "account_restored"
    AUTHORIZATION_DENIED = "authorization_denied"

    # Password events
    PASSWORD_CHANGED = "password_changed"
    PASSWORD_RESET = "password_reset"

    # Schedule events
    ACCESS_RULE_CREATED = "access_rule_created"
    ACCESS_RULE_UPDATED = "access_rule_updated"
    ACCESS_RULE_DELETED = "access_rule_deleted"
    ACCESS_RULES_CLEARED = "access_rules_cleared"

    # Catalog events
    BRANCH_CREATED = "branch_created"
    BRANCH_UPDATED = "branch_updated"
    BRANCH_DELETED = "branch_deleted"
    BRANCH_RESTORED = "branch_restored"
    CATEGORY_CREATED = "category_created"
    CATEGORY_UPDATED = "category_updated"
    CATEGORY_DELETED = "category_deleted"
    DRIVER_DETAILS_UPDATED = "driver_details_updated"


security_logger = logging.getLogger("security")


def log_security_event(
    event_type: SecurityEventType,
    account_id: UUID | str | None = None,
    username: str | None = None,
    target_account_id: UUID | str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    details: dict[str, Any] | None = None,
    success: bool = True,
) -> None:
    """Log a security event.

    Args:
        event_type: The type of security event
        account_id: The account performing the action
        username: The username of the acting account
        target_account_id: The account being affected (for management actions)
        ip_address: The client IP address
        user_agent: The client user agent
        details: Additional event-specific details
        success: Whether the operation succeeded
    """
    event_data: dict[str, Any] = {
        "event_type": event_type.value,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": success,
        "actor": {
            "account_id": str(account_id) if account_id else None,
            "username": username,
            "ip_address": ip_address,
            "user_agent": user_agent,
        },
    }

    if target_account_id:
        event_data["target"] = {"account_id": str(target_account_id)}

    if details:
        event_data["details"] = details

    if success:
        security_logger.info(
            f"Security event: {event_type.value}",
            extra={"security_event": event_data},
        )
    else:
        security_logger.warning(
            f"Security event (failed): {event_type.value}",
            extra={"security_event": event_data},
        )
