"""
Tests for the navigation catalog, the access gate, the permission matrix
and the navigation presenter.  Everything here is pure; no database.
"""
import pytest

from hmscore.access import MENU_ITEMS, Role, can_access, can_access_path, coerce_role, menu_for, sections_for, visible_items
from hmscore.access.catalog import CATEGORY_DENY, Category, MenuItem
from hmscore.access.matrix import ACTIONS, MODULES, effective_permissions, has_permission, normalise_actions
from hmscore.access.presenter import NavigationEvent, NavigationPresenter


def titles(items):
    return [item.title for item in items]


@pytest.mark.parametrize('role', list(Role))
def test_visible_items_respect_required_roles_and_category_deny(role):
    for item in visible_items(role, MENU_ITEMS):
        assert role in item.required_roles
        assert role not in CATEGORY_DENY.get(item.category, frozenset())


@pytest.mark.parametrize('role', list(Role))
def test_visible_items_keep_catalog_order(role):
    visible = visible_items(role, MENU_ITEMS)
    positions = [MENU_ITEMS.index(item) for item in visible]
    assert positions == sorted(positions)


def test_opd_manager_sees_only_dashboard_opd_and_patient_service():
    assert titles(menu_for(Role.OPD_MANAGER)) == ['Dashboard', 'OPD Service', 'Patient Service']
    # items that list OPD_MANAGER but sit in denied categories
    listed = [i for i in MENU_ITEMS if Role.OPD_MANAGER in i.required_roles
              and i.category in (Category.SUPPORT_SERVICES, Category.MANAGEMENT)]
    assert listed
    for item in listed:
        assert not can_access(Role.OPD_MANAGER, item)


def test_nurse_is_denied_management_even_when_listed():
    item = next(i for i in MENU_ITEMS if i.title == 'Nurse Department Preferences')
    assert Role.NURSE in item.required_roles
    assert not can_access(Role.NURSE, item)
    assert not any(s[0] is Category.MANAGEMENT for s in sections_for(Role.NURSE))
    assert can_access(Role.ADMIN, item)


def test_unknown_role_gets_dashboard_only():
    assert titles(menu_for('JANITOR')) == ['Dashboard']
    assert titles(menu_for(None)) == ['Dashboard']
    assert visible_items('JANITOR', MENU_ITEMS) == ()
    assert not can_access('JANITOR', MENU_ITEMS[0])


def test_role_lookup_is_case_insensitive():
    assert coerce_role('nurse') is Role.NURSE
    assert coerce_role(' Super_Admin ') is Role.SUPER_ADMIN
    assert coerce_role('') is None


def test_sections_omit_empty_categories():
    sections = sections_for(Role.PATIENT)
    assert [c for c, _ in sections] == [Category.DASHBOARD, Category.CORE_SERVICES, Category.SUPPORT_SERVICES]
    assert all(items for _, items in sections)


def test_super_admin_has_no_category_denial():
    expected = tuple(i for i in MENU_ITEMS if Role.SUPER_ADMIN in i.required_roles)
    assert visible_items(Role.SUPER_ADMIN, MENU_ITEMS) == expected


def test_can_access_path_denies_unknown_paths():
    assert can_access_path(Role.SUPER_ADMIN, '/dashboard')
    assert not can_access_path(Role.SUPER_ADMIN, '/does-not-exist')
    assert not can_access_path(Role.PATIENT, '/users')


def test_item_without_roles_is_hidden_from_everyone():
    item = MenuItem('Hidden', '/hidden', Category.CORE_SERVICES)
    assert not any(can_access(role, item) for role in Role)


# ---------------------------------------------------------------------
# Permission matrix
# ---------------------------------------------------------------------
class Override:
    def __init__(self, role, module, **flags):
        self.role = role
        self.module = module
        for action in ACTIONS:
            setattr(self, f'can_{action}', flags.get(action, False))


def test_super_admin_is_always_allowed():
    deny_all = [Override(Role.SUPER_ADMIN, m) for m in MODULES]
    assert all(has_permission(Role.SUPER_ADMIN, m, a, deny_all) for m in MODULES for a in ACTIONS)


def test_default_permissions():
    assert has_permission(Role.ADMIN, 'STAFF', 'delete')
    assert has_permission(Role.NURSE, 'STAFF', 'view')
    assert not has_permission(Role.NURSE, 'STAFF', 'edit')
    assert not has_permission(Role.PATIENT, 'USERS', 'view')
    assert not has_permission(Role.ADMIN, 'STAFF', 'fly')
    assert not has_permission('JANITOR', 'DASHBOARD', 'view')


def test_override_row_replaces_default():
    overrides = [Override(Role.NURSE, 'STAFF', view=True, edit=True)]
    assert has_permission(Role.NURSE, 'STAFF', 'edit', overrides)
    revoke = [Override(Role.ADMIN, 'STAFF')]
    assert not has_permission(Role.ADMIN, 'STAFF', 'view', revoke)
    # other modules keep their defaults
    assert has_permission(Role.ADMIN, 'USERS', 'view', revoke)


def test_effective_permissions_covers_every_module_and_action():
    table = effective_permissions(Role.DOCTOR)
    assert set(table) == set(MODULES)
    assert all(set(actions) == set(ACTIONS) for actions in table.values())
    assert table['PRESCRIPTIONS']['approve'] is True


def test_normalise_actions_accepts_both_key_styles():
    flags = normalise_actions({'view': True, 'canEdit': True})
    assert flags['view'] and flags['edit']
    assert not flags['delete']
    assert normalise_actions(None) == {a: False for a in ACTIONS}


# ---------------------------------------------------------------------
# Presenter
# ---------------------------------------------------------------------
def test_render_groups_sections_in_order():
    rendered = NavigationPresenter(Role.OPD_MANAGER).render()
    assert [s['key'] for s in rendered] == ['dashboard', 'core_services']
    assert [i['title'] for i in rendered[1]['items']] == ['OPD Service', 'Patient Service']


def test_click_emits_navigation_event():
    events = []
    presenter = NavigationPresenter('ADMIN', on_navigate=events.append)
    event = presenter.click('/nurse-preferences')
    assert event == NavigationEvent('/nurse-preferences')
    assert events == [event]


def test_click_without_on_navigate_is_a_noop():
    presenter = NavigationPresenter(Role.ADMIN)
    assert presenter.click('/dashboard') is None


def test_click_on_hidden_item_is_a_noop():
    events = []
    presenter = NavigationPresenter(Role.NURSE, on_navigate=events.append)
    assert presenter.click('/nurse-preferences') is None
    assert presenter.click('/unknown') is None
    assert events == []


def test_external_item_goes_to_open_external():
    internal, external = [], []
    presenter = NavigationPresenter(Role.PATIENT, on_navigate=internal.append, on_open_external=external.append)
    event = presenter.click('https://help.hmscore.example/')
    assert event.external
    assert external == [event]
    assert internal == []
    assert NavigationPresenter(Role.PATIENT, on_navigate=internal.append).click('https://help.hmscore.example/') is None
    assert internal == []


def test_role_label():
    assert NavigationPresenter('opd_manager').role_label == 'OPD Manager'
    assert NavigationPresenter('nobody').role_label == ''
