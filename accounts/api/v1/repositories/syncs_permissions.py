from typing import Any, Dict, Iterable, Mapping

from sqlalchemy.ext.asyncio import AsyncSession


class SyncsPermissions:
    """
    Permission override handling shared by models that carry a `permissions` map.

    The map only ever holds granted permissions: revoking one removes its key
    instead of storing a false flag, since permission checks look at key presence.
    """

    @staticmethod
    def normalize_permissions(permissions: Any) -> Dict[str, bool]:
        """
        Accepts a list of permission names, a list of {"name": ...} objects,
        or a mapping of name -> flag, and returns the granted ones.
        """
        if not permissions:
            return {}

        if isinstance(permissions, Mapping):
            return {str(name): True for name, granted in permissions.items() if granted}

        normalized = {}
        for permission in permissions:
            if isinstance(permission, Mapping):
                permission = permission.get("name")
            if permission:
                normalized[str(permission)] = True
        return normalized

    async def sync_permissions(self, db: AsyncSession, model, permissions: Any):
        """Replace the whole permission map of `model`."""
        model.permissions = self.normalize_permissions(permissions)
        await db.commit()
        return model

    async def add_permissions(self, db: AsyncSession, model, permissions: Iterable[str]):
        await db.refresh(model, attribute_names=["permissions"])
        existing = dict(model.permissions or {})

        for permission in permissions:
            existing[permission] = True

        model.permissions = existing
        await db.commit()
        return model

    async def remove_permissions(self, db: AsyncSession, model, permissions: Iterable[str]):
        await db.refresh(model, attribute_names=["permissions"])
        existing = dict(model.permissions or {})

        for permission in permissions:
            existing.pop(permission, None)

        model.permissions = existing
        await db.commit()
        return model
