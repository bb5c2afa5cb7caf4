"""
Shared support for the Channel Services provisioning flows.
"""

__all__ = [
    "base_flow",
    "billing_client",
    "channel_client",
    "cli",
    "config",
    "exceptions",
    "gcp_client",
    "iam",
    "mappers",
    "offer_selector",
    "operations",
    "site_verification_client",
]
