import pytest

from accounts.api.v1.repositories import SyncsPermissions


pytestmark = pytest.mark.unit


class TestNormalizePermissions:

    def test_list_of_names(self):
        assert SyncsPermissions.normalize_permissions(["files.view", "files.create"]) == {
            "files.view": True,
            "files.create": True,
        }

    def test_list_of_named_objects(self):
        assert SyncsPermissions.normalize_permissions([{"name": "users.view"}, {"name": ""}, {}]) == {
            "users.view": True,
        }

    def test_mapping_keeps_only_granted(self):
        assert SyncsPermissions.normalize_permissions({"a": True, "b": False, "c": 1}) == {"a": True, "c": True}

    @pytest.mark.parametrize("empty", [None, [], {}])
    def test_empty_input(self, empty):
        assert SyncsPermissions.normalize_permissions(empty) == {}


class TestUserPermissions:

    async def test_add_keeps_other_grants(self, db, user_repository):
        user = await user_repository.create(db, {"email": "ana@example.com", "permissions": ["files.view"]})

        await user_repository.add_permissions(db, user, ["files.create"])

        assert user.permissions == {"files.view": True, "files.create": True}

    async def test_remove_deletes_the_key(self, db, user_repository):
        user = await user_repository.create(
            db, {"email": "ana@example.com", "permissions": ["files.view", "files.create"]}
        )

        await user_repository.remove_permissions(db, user, ["files.create"])

        assert user.permissions == {"files.view": True}
        assert "files.create" not in user.permissions

    async def test_remove_unknown_name_is_a_no_op(self, db, user_repository):
        user = await user_repository.create(db, {"email": "ana@example.com", "permissions": ["files.view"]})

        await user_repository.remove_permissions(db, user, ["users.delete"])

        assert user.permissions == {"files.view": True}

    async def test_add_then_remove_restores_previous_map(self, db, user_repository):
        user = await user_repository.create(db, {"email": "ana@example.com", "permissions": ["files.view"]})
        before = dict(user.permissions)

        await user_repository.add_permissions(db, user, ["users.view", "users.edit"])
        await user_repository.remove_permissions(db, user, ["users.view", "users.edit"])

        assert user.permissions == before

    async def test_changes_are_persisted(self, db, user_repository):
        user = await user_repository.create(db, {"email": "ana@example.com"})
        await user_repository.add_permissions(db, user, ["files.view"])

        reloaded = await user_repository.find_or_fail(db, user.id, ["roles"])

        assert reloaded.permissions == {"files.view": True}
        assert reloaded.has_permission("files.view")
        assert not reloaded.has_permission("files.delete")


class TestRolePermissions:

    async def test_roles_share_permission_handling(self, db, role_repository, editor_role):
        await role_repository.add_permissions(db, editor_role, ["posts.edit", "posts.view"])
        await role_repository.remove_permissions(db, editor_role, ["posts.view"])

        reloaded = await role_repository.get_by_name(db, "editor")

        assert reloaded.permissions == {"posts.edit": True}
