"""
Explicit caller context passed to every engine operation.
"""
from dataclasses import dataclass

ADMIN_ROLES = frozenset({"admin", "superadmin"})


@dataclass(frozen=True)
class CallerContext:
    """Who is calling, on behalf of which company."""
    user_id: str
    company_id: str
    role: str = "member"

    @property
    def is_admin(self) -> bool:
        return self.role.lower() in ADMIN_ROLES
