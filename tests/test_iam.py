"""
Tests for IAM policy merging.
"""

import copy

import pytest

from channel_common.iam import add_member_to_role, find_binding

ROLE = "roles/billing.user"
MEMBER = "user:admin@reseller.example"


@pytest.fixture
def policy():
    return {
        "version": 1,
        "etag": "BwXhqDk8J5o=",
        "bindings": [
            {"role": "roles/billing.admin", "members": ["user:owner@customer.example"]},
            {"role": ROLE, "members": ["user:a@reseller.example"]},
            {"role": "roles/billing.viewer", "members": ["group:finance@customer.example"]},
        ],
    }


def test_find_binding(policy):
    assert find_binding(policy, ROLE) == 1
    assert find_binding(policy, "roles/owner") is None
    assert find_binding({}, ROLE) is None


def test_add_member_to_existing_binding(policy):
    """Test member is appended to the existing role binding"""
    result = add_member_to_role(policy, ROLE, MEMBER)

    assert result["bindings"][1] == {
        "role": ROLE,
        "members": ["user:a@reseller.example", MEMBER],
    }
    assert len(result["bindings"]) == 3


def test_other_bindings_unchanged_and_ordered(policy):
    """Test unrelated bindings keep content and order"""
    result = add_member_to_role(policy, ROLE, MEMBER)

    assert result["bindings"][0] == policy["bindings"][0]
    assert result["bindings"][2] == policy["bindings"][2]
    assert [b["role"] for b in result["bindings"]] == [
        "roles/billing.admin",
        ROLE,
        "roles/billing.viewer",
    ]


def test_add_new_binding(policy):
    """Test a missing role gets exactly one new single-member binding"""
    policy["bindings"].pop(1)
    original = copy.deepcopy(policy["bindings"])

    result = add_member_to_role(policy, ROLE, MEMBER)

    assert result["bindings"][:2] == original
    assert result["bindings"][2] == {"role": ROLE, "members": [MEMBER]}
    assert len(result["bindings"]) == 3


def test_policy_without_bindings():
    """Test an empty policy gets a bindings list"""
    result = add_member_to_role({"version": 1}, ROLE, MEMBER)

    assert result["bindings"] == [{"role": ROLE, "members": [MEMBER]}]


def test_duplicate_member_not_deduplicated(policy):
    """Test granting twice lists the member twice"""
    once = add_member_to_role(policy, ROLE, MEMBER)
    twice = add_member_to_role(once, ROLE, MEMBER)

    assert twice["bindings"][1]["members"].count(MEMBER) == 2


def test_input_policy_not_mutated(policy):
    """Test the fetched policy is left untouched"""
    snapshot = copy.deepcopy(policy)

    add_member_to_role(policy, ROLE, MEMBER)

    assert policy == snapshot


def test_etag_dropped(policy):
    """Test the written policy carries no etag so the write is unconditional"""
    result = add_member_to_role(policy, ROLE, MEMBER)

    assert "etag" not in result
    assert result["version"] == 1
