"""Audit logging package."""

from finhealth.audit.logger import AuditLogger, configure_logging

__all__ = ["AuditLogger", "configure_logging"]
