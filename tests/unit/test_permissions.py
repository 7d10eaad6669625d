from datetime import timedelta
import pytest
from app.auth.jwt_handler import decode_access_token
from app.auth.permissions import PermissionChecker, format_permission_name, parse_permission_name
from app.core.exceptions import ForbiddenError
from app.core.security import create_access_token


class TestPermissionChecker:
    """Role permission resolution"""

    def test_exact_permission(self):
        checker = PermissionChecker(["inventory.view"])
        assert checker.can("inventory.view")
        assert checker.cannot("inventory.manage")

    def test_resource_admin_grants_every_action(self):
        checker = PermissionChecker(["inventory.admin"])
        assert checker.can("inventory.view")
        assert checker.can("inventory.manage")
        assert checker.cannot("users.manage")

    def test_system_admin_grants_everything(self):
        checker = PermissionChecker(["system.admin"])
        assert checker.can("inventory.manage")
        assert checker.can("reports.export")

    def test_superadmin_flag(self):
        checker = PermissionChecker([], is_superadmin=True)
        assert checker.can("inventory.manage")
        assert checker.cannot("inventory.manage") is False

    def test_non_string_entries_are_ignored(self):
        checker = PermissionChecker(["inventory.view", None, 3])
        assert checker.permissions == ["inventory.view"]

    def test_require_raises_forbidden(self):
        checker = PermissionChecker(["inventory.view"])
        checker.require("inventory.view")

        with pytest.raises(ForbiddenError) as exc:
            checker.require("inventory.manage")
        assert exc.value.status_code == 403
        assert exc.value.detail == "No tienes permisos para realizar esta acción: inventory.manage"

    def test_require_custom_message(self):
        with pytest.raises(ForbiddenError) as exc:
            PermissionChecker().require("inventory.manage", custom_message="Acceso denegado")
        assert exc.value.detail == "Acceso denegado"


class TestPermissionNames:

    def test_parse_uses_last_dot(self):
        assert parse_permission_name("inventory.counts.manage") == ("inventory.counts", "manage")

    def test_parse_rejects_names_without_action(self):
        with pytest.raises(ValueError):
            parse_permission_name("inventory")

    def test_format(self):
        assert format_permission_name("inventory", "view") == "inventory.view"


class TestAccessToken:

    def test_round_trip_subject(self):
        payload = decode_access_token(create_access_token(42))
        assert payload["sub"] == "42"
        assert payload["type"] == "access"

    def test_expired_token_is_rejected(self):
        token = create_access_token(42, expires_delta=timedelta(minutes=-5))
        assert decode_access_token(token) is None

    def test_other_token_types_are_rejected(self):
        token = create_access_token(42, type="refresh")
        assert decode_access_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_access_token("not-a-token") is None
