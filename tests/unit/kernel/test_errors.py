"""Unit tests for kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from mp_rbac.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    SerializationError,
    UnauthorizedError,
    ValidationError,
)


class TestBaseError:
    def test_message_is_stored(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"

    def test_default_code(self) -> None:
        assert BaseError("m").code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_cause_sets_dunder_cause(self) -> None:
        cause = RuntimeError("root")
        err = BaseError("wrap", cause=cause)
        assert err.__cause__ is cause
        assert "root" in err.to_dict()["cause"]

    def test_str_is_valid_json(self) -> None:
        parsed = json.loads(str(BaseError("oops", code="oops")))
        assert parsed["code"] == "oops"
        assert parsed["message"] == "oops"


# ---------------------------------------------------------------------------
# Domain errors
# ---------------------------------------------------------------------------


class TestValidationError:
    def test_is_domain_error(self) -> None:
        assert issubclass(ValidationError, DomainError)

    def test_errors_list_is_kept(self) -> None:
        err = ValidationError("Invalid role", errors=["Role name is required."])
        assert err.errors == ["Role name is required."]
        assert err.to_dict()["errors"] == ["Role name is required."]

    def test_errors_default_to_empty(self) -> None:
        assert ValidationError("bad").errors == []

    def test_http_status(self) -> None:
        assert ValidationError("bad").http_status == 400


class TestNotFoundError:
    def test_message_with_identifier(self) -> None:
        err = NotFoundError("Role", "ghost")
        assert err.message == "Role 'ghost' not found"
        assert err.resource == "Role"
        assert err.identifier == "ghost"

    def test_message_without_identifier(self) -> None:
        assert NotFoundError("Role").message == "Role not found"

    def test_http_status(self) -> None:
        assert NotFoundError("Role").http_status == 404


class TestConflictError:
    def test_http_status(self) -> None:
        assert ConflictError("system role").http_status == 409

    def test_default_code(self) -> None:
        assert ConflictError("x").code == "conflict"


# ---------------------------------------------------------------------------
# Application / infrastructure
# ---------------------------------------------------------------------------


class TestApplicationErrors:
    def test_unauthorized_status(self) -> None:
        assert UnauthorizedError("no ctx").http_status == 401

    def test_forbidden_defaults(self) -> None:
        err = ForbiddenError()
        assert err.message == "Access denied"
        assert err.http_status == 403
        assert err.permission is None

    def test_forbidden_carries_permission(self) -> None:
        err = ForbiddenError("nope", permission="tenant.update")
        assert err.permission == "tenant.update"

    @pytest.mark.parametrize("cls", [UnauthorizedError, ForbiddenError])
    def test_are_application_errors(self, cls: type[BaseError]) -> None:
        assert issubclass(cls, ApplicationError)


class TestInfrastructureErrors:
    def test_serialization_error_hierarchy(self) -> None:
        assert issubclass(SerializationError, InfrastructureError)
        assert SerializationError("x").code == "serialization_error"
