"""Role groups used to authorize API operations.

Each group lists the roles allowed to perform one family of operations.
SUPER_ADMIN and ADMIN belong to every group.
"""

from __future__ import annotations

from portfolio_cms.data.models.enums import UserRole

STAFF_ROLES: frozenset[UserRole] = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN})

CONTENT_ROLES: frozenset[UserRole] = STAFF_ROLES | {UserRole.HIGHER_MANAGER, UserRole.CRAFTER}

FINANCE_ROLES: frozenset[UserRole] = STAFF_ROLES | {UserRole.FINANCE}

PROJECT_MANAGEMENT_ROLES: frozenset[UserRole] = STAFF_ROLES | {UserRole.HIGHER_MANAGER}

# Roles a staff registration may assign; SUPER_ADMIN has its own bootstrap flow.
ASSIGNABLE_STAFF_ROLES: frozenset[UserRole] = frozenset(UserRole) - {UserRole.SUPER_ADMIN}
