import uuid

from app.core.permissions import (
    PERMISSIONS,
    AuthorizationResult,
    RequestContext,
    check_permission,
    has_permission,
)


def test_has_permission_membership():
    assert has_permission(["a", PERMISSIONS.STAFF_INCENTIVES_MANAGE], PERMISSIONS.STAFF_INCENTIVES_MANAGE)
    assert not has_permission(["a", "b"], PERMISSIONS.STAFF_INCENTIVES_MANAGE)
    assert not has_permission([], PERMISSIONS.STAFF_INCENTIVES_MANAGE)
    assert not has_permission(None, PERMISSIONS.STAFF_INCENTIVES_MANAGE)


def test_anonymous_context_is_unauthenticated():
    result = check_permission(RequestContext.anonymous(), PERMISSIONS.STAFF_INCENTIVES_MANAGE)
    assert result is AuthorizationResult.UNAUTHENTICATED


def test_missing_context_is_unauthenticated():
    assert check_permission(None, PERMISSIONS.STAFF_INCENTIVES_MANAGE) is AuthorizationResult.UNAUTHENTICATED


def test_user_without_permission_list_is_unauthenticated():
    # A session whose role carries no permissions counts as no session at all
    context = RequestContext(user_id=uuid.uuid4(), permissions=None)
    assert check_permission(context, PERMISSIONS.STAFF_INCENTIVES_MANAGE) is AuthorizationResult.UNAUTHENTICATED


def test_user_with_empty_permissions_is_forbidden():
    context = RequestContext(user_id=uuid.uuid4(), permissions=[])
    assert check_permission(context, PERMISSIONS.STAFF_INCENTIVES_MANAGE) is AuthorizationResult.FORBIDDEN


def test_user_with_permission_is_authorized():
    context = RequestContext(user_id=uuid.uuid4(), permissions=[PERMISSIONS.STAFF_INCENTIVES_MANAGE])
    assert check_permission(context, PERMISSIONS.STAFF_INCENTIVES_MANAGE) is AuthorizationResult.AUTHORIZED
