"""
Core Base Module

Provides shared base classes and mixins for the HR apps.

Exports:
    - StatusChoices: Standard ACTIVE/INACTIVE status choices
    - AuditMixin: Adds created_at, updated_at, created_by, updated_by
    - SoftDeleteMixin: Adds status + soft delete behavior

Managers and querysets live in core.base.managers and are imported from there
directly, so this package stays importable before the app registry is ready.
"""
