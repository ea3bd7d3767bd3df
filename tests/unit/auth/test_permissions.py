from __future__ import annotations

import pytest

from obravista.auth.permissions import (
    ALL_PAGES,
    AccessLevel,
    Action,
    PermissionSubject,
    can_access_page,
    can_perform,
    has_module_access,
    require_action,
    resolve_access_level,
)
from obravista.core.enums import UserType
from obravista.core.exceptions import AuthorizationError


def _user(**custom):
    return PermissionSubject(user_id=2, type=UserType.USER, custom_permissions=custom)


def test_levels_are_ordered():
    assert AccessLevel.BLOCKED < AccessLevel.VIEW < AccessLevel.EDIT < AccessLevel.MANAGE
    assert max(AccessLevel) is AccessLevel.MANAGE


def test_legacy_create_level_reads_as_manage():
    assert AccessLevel.parse("criar") is AccessLevel.MANAGE
    with pytest.raises(ValueError):
        AccessLevel.parse("superuser")


def test_no_user_is_blocked_everywhere():
    assert resolve_access_level("obras", None) is AccessLevel.BLOCKED
    assert not can_perform("obras", Action.READ, None)
    assert not has_module_access("operacional", None)


def test_admin_overrides_custom_entries():
    admin = PermissionSubject(user_id=1, type=UserType.ADMIN, custom_permissions={"obras": "bloqueado"})
    for page in (*ALL_PAGES, "crm", "ferramentas"):
        assert resolve_access_level(page, admin) is AccessLevel.MANAGE
        assert can_perform(page, Action.DELETE, admin)


def test_custom_entry_wins_over_role_defaults():
    user = _user(obras="editar", kanban="bloqueado", crm="visualizar")
    assert resolve_access_level("obras", user) is AccessLevel.EDIT
    assert resolve_access_level("kanban", user) is AccessLevel.BLOCKED
    assert resolve_access_level("crm", user) is AccessLevel.VIEW


def test_role_defaults_for_regular_users():
    user = _user()
    assert resolve_access_level("equipes", user) is AccessLevel.VIEW
    assert resolve_access_level("usuarios", user) is AccessLevel.BLOCKED
    assert resolve_access_level("crm", user) is AccessLevel.BLOCKED
    assert can_access_page("dashboard", user)
    assert not can_access_page("financeiro", user)


def test_action_minimums():
    viewer = _user(obras="visualizar")
    editor = _user(obras="editar")
    assert can_perform("obras", Action.READ, viewer)
    assert not can_perform("obras", Action.CREATE, viewer)
    for action in (Action.CREATE, Action.EDIT, Action.DELETE):
        assert can_perform("obras", action, editor)


def test_require_action_raises_authorization_error():
    with pytest.raises(AuthorizationError, match="excluir on obras"):
        require_action("obras", Action.DELETE, _user())


def test_module_access():
    user = _user()
    assert has_module_access("operacional", user)
    assert not has_module_access("crm", user)
    assert has_module_access("crm", _user(crm="visualizar"))
    assert not has_module_access("unknown", user)
