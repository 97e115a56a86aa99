"""
Audit logging for admin actions

Records who changed what and when through the structured `audit` logger.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from gaia.core.config import settings

audit_logger = logging.getLogger("audit")
audit_logger.setLevel(logging.INFO)

# Action categories
ACTION_PRODUCT_CREATE = "product.create"
ACTION_PRODUCT_UPDATE = "product.update"
ACTION_PRODUCT_DELETE = "product.delete"
ACTION_CATEGORY_CREATE = "category.create"
ACTION_CATEGORY_UPDATE = "category.update"
ACTION_CATEGORY_DELETE = "category.delete"
ACTION_CONTENT_CREATE = "content.create"
ACTION_CONTENT_UPDATE = "content.update"
ACTION_CONTENT_DELETE = "content.delete"
ACTION_ORDER_STATUS = "order.status_update"

_SENSITIVE_KEYS = ("password", "secret", "token", "key", "credential")


def log_admin_action(
    action: str,
    user_id: int,
    user_email: str,
    resource_type: str,
    resource_id: Optional[Any] = None,
    details: Optional[dict] = None,
    ip_address: Optional[str] = None,
    success: bool = True,
):
    """
    Log an administrative action.

    Args:
        action: Action identifier (e.g., "product.create")
        user_id: ID of the admin performing the action
        user_email: Email of the admin
        resource_type: Type of resource affected (e.g., "product", "order")
        resource_id: ID of the affected resource (if applicable)
        details: Additional context about the action
        ip_address: IP address of the request
        success: Whether the action succeeded
    """
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "admin_id": user_id,
        "admin_email": user_email,
        "resource_type": resource_type,
        "resource_id": str(resource_id) if resource_id is not None else None,
        "success": success,
        "ip_address": ip_address,
        "environment": settings.ENVIRONMENT,
    }

    if details:
        log_entry["details"] = {
            k: v for k, v in details.items()
            if k.lower() not in _SENSITIVE_KEYS
        }

    if success:
        audit_logger.info(
            f"AUDIT: {action} by {user_email} on {resource_type}/{resource_id}",
            extra={"audit": log_entry}
        )
    else:
        audit_logger.warning(
            f"AUDIT FAILED: {action} by {user_email} on {resource_type}/{resource_id}",
            extra={"audit": log_entry}
        )
