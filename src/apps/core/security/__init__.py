"""Security module with session-aware RBAC decorators."""

from apps.core.security.rbac import enforce_permission, require_permission

__all__ = ["enforce_permission", "require_permission"]
