"""Audit logging package."""

from fintrust.audit.display import event_html
from fintrust.audit.log import AuditLog

__all__ = ["AuditLog", "event_html"]
