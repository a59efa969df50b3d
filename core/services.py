"""
Core — Audit Service

Writes audit log entries from any app. Callers run inside the same
transaction as the write being audited, so a rollback drops the entry too.

@file core/services.py
"""

import logging
import uuid
from decimal import Decimal
from typing import Any

from core.models import AuditLog

logger = logging.getLogger('padbank')


class AuditService:
    """Centralised audit logging for every ledger write."""

    @staticmethod
    def log(
        *,
        actor,
        action: str,
        model_name: str,
        object_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        if actor is not None and not getattr(actor, 'is_authenticated', False):
            actor = None
        return AuditLog.objects.create(
            actor=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            old_values=old_values,
            new_values=new_values,
        )

    @staticmethod
    def snapshot(instance, fields=None) -> dict[str, Any]:
        """
        Serialise a model instance to a plain dict suitable for JSON
        storage. Dates are ISO-formatted, UUIDs and Decimals stringified.
        """
        data = {
            field.attname: field.value_from_object(instance)
            for field in instance._meta.concrete_fields
            if fields is None or field.name in fields
        }
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                cleaned[key] = None
            elif isinstance(value, Decimal):
                cleaned[key] = str(value)
            elif hasattr(value, 'isoformat'):
                cleaned[key] = value.isoformat()
            elif isinstance(value, uuid.UUID):
                cleaned[key] = str(value)
            else:
                cleaned[key] = value
        return cleaned

