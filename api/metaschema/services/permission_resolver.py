"""Field edit permissions for upload forms."""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from metaschema.schemas.metadata_schema import ResolvedField


class MetadataPermissionResolver(ABC):
    """Decides which resolved fields an actor may edit."""

    @abstractmethod
    def editable_fields(
        self,
        fields: List[ResolvedField],
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        user_role: Optional[str] = None,
    ) -> List[ResolvedField]:
        """Return the subset of fields the actor may edit, order kept."""
        pass


class RolePermissionResolver(MetadataPermissionResolver):
    """Role-based permissions.

    Without a role (system context) every field is kept. With a role, the
    role must be an editor role and the field must be user-editable.
    """

    def __init__(self, editor_roles: Iterable[str]):
        self.editor_roles = {role.lower() for role in editor_roles}

    def editable_fields(
        self,
        fields: List[ResolvedField],
        tenant_id: int,
        brand_id: Optional[int],
        category_id: Optional[int],
        user_role: Optional[str] = None,
    ) -> List[ResolvedField]:
        if user_role is None:
            return list(fields)
        if user_role.lower() not in self.editor_roles:
            return []
        return [field for field in fields if field.is_user_editable]
