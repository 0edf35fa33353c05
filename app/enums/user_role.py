from enum import Enum


class UserRole(str, Enum):
    """Enum for the roles a user can hold"""

    OWNER = "owner"
    ADMIN = "admin"
    SENIOR_ADMIN = "senior_admin"
    TENANT = "tenant"
    WORKER = "worker"

    def __str__(self):
        return self.value


# Roles that manage properties and may act on every ticket
PRIVILEGED_ROLES = (UserRole.OWNER, UserRole.ADMIN, UserRole.SENIOR_ADMIN)
ADMIN_ROLES = (UserRole.ADMIN, UserRole.SENIOR_ADMIN)
