"""Unit tests for wildcard and resource-hierarchy permission matching."""

from __future__ import annotations

import pytest

from mp_rbac.rbac.matcher import (
    covers,
    find_matching,
    has_all,
    has_any,
    has_permission,
    matches,
    resource_matches,
    split_permission_id,
)


# ---------------------------------------------------------------------------
# Wildcard axis
# ---------------------------------------------------------------------------


class TestMatches:
    @pytest.mark.parametrize("candidate", ["tenant.read", "workspace.settings.manage", "x", ""])
    def test_star_matches_everything(self, candidate: str) -> None:
        assert matches(candidate, "*") is True

    def test_prefix_wildcard(self) -> None:
        assert matches("workspace.read", "workspace.*") is True
        assert matches("workspace.settings.manage", "workspace.*") is True

    def test_prefix_wildcard_keeps_the_dot(self) -> None:
        assert matches("tenant.read", "workspace.*") is False
        assert matches("workspaces.read", "workspace.*") is False

    def test_exact(self) -> None:
        assert matches("tenant.read", "tenant.read") is True
        assert matches("tenant.read", "tenant.write") is False

    def test_case_sensitive(self) -> None:
        assert matches("Tenant.read", "tenant.read") is False


class TestHasPermission:
    def test_granted_side_is_the_pattern(self) -> None:
        assert has_permission(["workspace.*"], "workspace.delete")
        assert not has_permission(["workspace.delete"], "workspace.*")

    def test_empty_grants(self) -> None:
        assert not has_permission([], "tenant.read")

    def test_any_and_all(self) -> None:
        granted = ["tenant.read", "dashboard.*"]
        assert has_any(granted, ["user.read", "dashboard.export"])
        assert not has_any(granted, ["user.read"])
        assert has_all(granted, ["tenant.read", "dashboard.read"])
        assert not has_all(granted, ["tenant.read", "user.read"])

    def test_find_matching_keeps_input_order(self) -> None:
        ids = ["dashboard.read", "tenant.read", "dashboard.export"]
        assert find_matching(ids, "dashboard.*") == ["dashboard.read", "dashboard.export"]


# ---------------------------------------------------------------------------
# Resource hierarchy axis
# ---------------------------------------------------------------------------


class TestResourceMatches:
    def test_exact(self) -> None:
        assert resource_matches("tenant", "tenant")

    def test_dotted_prefix(self) -> None:
        assert resource_matches("tenant", "tenant.members")

    def test_plain_string_prefix_is_not_enough(self) -> None:
        assert not resource_matches("tenant", "tenants")
        assert not resource_matches("tenant.members", "tenant")


class TestSplitPermissionId:
    def test_splits_at_last_dot(self) -> None:
        assert split_permission_id("tenant.members.read") == ("tenant.members", "read")

    def test_no_dot(self) -> None:
        assert split_permission_id("tenant") == ("tenant", "")


class TestCovers:
    def test_hierarchy_grant(self) -> None:
        assert covers("tenant.read", "tenant.members.read")

    def test_hierarchy_requires_same_action(self) -> None:
        assert not covers("tenant.read", "tenant.members.update")

    def test_action_wildcard_over_hierarchy(self) -> None:
        assert covers("tenant.*", "tenant.members.update")

    def test_child_does_not_cover_parent(self) -> None:
        assert not covers("tenant.members.read", "tenant.read")

    def test_wildcard_axis_alone(self) -> None:
        assert covers("*", "audit.export")

    def test_unrelated_resource_sharing_a_segment(self) -> None:
        assert not covers("tenant.read", "settings.tenant.read")

    @pytest.mark.parametrize("requested", ["", None])
    def test_empty_request_is_never_covered(self, requested: str | None) -> None:
        assert covers("*", requested) is False  # type: ignore[arg-type]
