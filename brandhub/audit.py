"""
Audit logging helpers and enums.

Centralized helper to persist normalized audit records for admin mutations.
"""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Optional, Dict

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from brandhub.db import schemas
from brandhub.db.repositories import audits as audit_repo

logger = logging.getLogger(__name__)


class AuditAction(str, Enum):
    # Users
    USER_REGISTER = "user_register"
    USER_UPDATE = "user_update"
    USER_PASSWORD_RESET = "user_password_reset"
    USER_DELETE = "user_delete"
    GOOGLE_CONNECT = "google_connect"
    GOOGLE_DISCONNECT = "google_disconnect"
    # Assets
    ASSET_CREATE = "asset_create"
    ASSET_MERGE = "asset_merge"
    ASSET_UPDATE = "asset_update"
    ASSET_DELETE = "asset_delete"
    ASSET_FILE_DELETE = "asset_file_delete"
    ASSET_REORDER = "asset_reorder"
    # Palettes and content
    PALETTE_UPSERT = "palette_upsert"
    PALETTE_UPDATE = "palette_update"
    COLOR_CREATE = "color_create"
    COLOR_UPDATE = "color_update"
    COLOR_DELETE = "color_delete"
    COLOR_REORDER = "color_reorder"
    CONTENT_UPSERT = "content_upsert"
    CONTENT_UPDATE = "content_update"
    CONTENT_DELETE = "content_delete"
    # Templates and tools
    TEMPLATE_CREATE = "template_create"
    TEMPLATE_UPDATE = "template_update"
    TEMPLATE_DELETE = "template_delete"
    TEMPLATE_REORDER = "template_reorder"
    TOOL_CREATE = "tool_create"
    TOOL_UPDATE = "tool_update"
    TOOL_DELETE = "tool_delete"
    TOOL_REORDER = "tool_reorder"
    # Brand configuration
    BRAND_CONFIG_UPDATE = "brand_config_update"
    GUIDELINES_IMPORT = "guidelines_import"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    db: Session,
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[uuid.UUID] = None,
    actor_user_id: Optional[uuid.UUID],
    metadata: Optional[Dict[str, Any]] = None,
) -> Optional[schemas.AuditLog]:
    """Persist one audit record.

    Audit failures never fail the request that triggered them; they are
    logged and the session is rolled back.
    """
    # Persist pure string values, not Enum reprs
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    audit_log = schemas.AuditLogCreate(
        action_type=action_value,
        status=status_value,
        target_type=target_type,
        target_id=target_id,
        metadata=metadata or {},
    )
    try:
        return audit_repo.create_audit_log(db, audit_log=audit_log, actor_user_id=actor_user_id)
    except SQLAlchemyError:
        logger.warning("audit_log_failed: action=%s target=%s", action_value, target_type, exc_info=True)
        db.rollback()
        return None


__all__ = ["AuditAction", "AuditStatus", "log"]
