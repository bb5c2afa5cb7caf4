"""
IAM policy helpers.

Policies are plain dicts in the Cloud IAM JSON representation:
{"version": 1, "etag": "...", "bindings": [{"role": ..., "members": [...]}]}
"""

import copy
import logging

logger = logging.getLogger(__name__)


def find_binding(policy: dict, role: str):
    """Return the index of the first binding for role, or None."""
    for index, binding in enumerate(policy.get("bindings", [])):
        if binding.get("role") == role:
            return index
    return None


def add_member_to_role(policy: dict, role: str, member: str) -> dict:
    """
    Grant role to member, returning a new policy.

    If a binding for role exists the member is appended to it, otherwise a
    new single-member binding is appended. Members are not de-duplicated, so
    granting the same member twice lists it twice. Other bindings are left
    untouched and in order.

    The fetched etag is dropped: the result is meant to be written back
    unconditionally with setIamPolicy, so a change made by someone else
    between the read and the write is overwritten.

    Args:
        policy: Policy as returned by getIamPolicy
        role: Role to grant, e.g. "roles/billing.user"
        member: Principal, e.g. "user:admin@example.com"

    Returns:
        Updated copy of the policy
    """
    new_policy = copy.deepcopy(policy)
    new_policy.pop("etag", None)
    bindings = new_policy.setdefault("bindings", [])

    index = find_binding(new_policy, role)
    if index is not None:
        bindings[index].setdefault("members", []).append(member)
        logger.info("Added %s to existing %s binding", member, role)
    else:
        bindings.append({"role": role, "members": [member]})
        logger.info("Added new %s binding for %s", role, member)

    return new_policy
