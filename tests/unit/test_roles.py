"""Role normalization and classification."""

import pytest

from roles import classify_role, normalize_role


class TestRoles:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Admin", "admin"),
            (" administrator ", "admin"),
            ("shop_manager", "staff"),
            ("external", "customer"),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_role(raw) == expected

    @pytest.mark.parametrize(
        "role,expected",
        [
            ("admin", "internal"),
            ("staff", "internal"),
            ("customer", "external"),
            ("subscriber", "unknown"),
            ("", "unknown"),
        ],
    )
    def test_classify(self, role, expected):
        assert classify_role(role) == expected
