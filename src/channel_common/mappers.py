"""
Request body builders for the Cloud Channel and Site Verification APIs.

This module handles:
  - Customer payloads built from flow settings
  - Cloud identity provisioning payloads
  - Entitlement payloads for GCP (pay-as-you-go) and Workspace (commitment) offers
  - Site Verification web resources
  - Extracting identifiers from API responses
"""

import logging
from typing import Optional

from channel_common.config import FlowSettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PAYMENT_PLAN_COMMITMENT = "COMMITMENT"
PERIOD_TYPE_YEAR = "YEAR"

PARAM_DISPLAY_NAME = "display_name"
PARAM_NUM_UNITS = "num_units"

SITE_TYPE_DOMAIN = "INET_DOMAIN"
VERIFICATION_METHOD_DNS_TXT = "DNS_TXT"

BILLING_ACCOUNT_PREFIX = "billingAccounts/"

# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


def build_customer(settings: FlowSettings) -> dict:
    """
    Build a Channel API Customer resource.

    Distributors creating a customer on behalf of a reseller also need the
    channel partner link ID, which is only sent when configured.
    """
    address = settings.postal_address
    customer = {
        "orgDisplayName": settings.org_display_name,
        "orgPostalAddress": {
            "addressLines": list(address.address_lines),
            "postalCode": address.postal_code,
            "regionCode": address.region_code,
        },
        "domain": settings.customer_domain,
    }
    if settings.channel_partner_id:
        customer["channelPartnerId"] = settings.channel_partner_id
    return customer


def build_cloud_identity_request(settings: FlowSettings) -> dict:
    """Build the provisionCloudIdentity body with the customer's first admin."""
    return {
        "cloudIdentityInfo": {
            "alternateEmail": settings.alternate_email,
            "languageCode": settings.language_code,
        },
        "user": {
            "givenName": settings.admin_given_name,
            "familyName": settings.admin_family_name,
            "email": settings.customer_admin_email,
        },
    }


# ---------------------------------------------------------------------------
# Entitlements
# ---------------------------------------------------------------------------


def string_parameter(name: str, value: str) -> dict:
    return {"name": name, "value": {"stringValue": value}}


def int64_parameter(name: str, value: int) -> dict:
    # int64 values are strings in the proto3 JSON mapping
    return {"name": name, "value": {"int64Value": str(value)}}


def build_gcp_entitlement(offer: dict, settings: FlowSettings) -> dict:
    """
    Build an entitlement for a Google Cloud Platform offer.

    The display_name parameter is shown in the Google Cloud console when the
    customer links the billing account to a project.
    """
    return {
        "offer": offer["name"],
        "parameters": [
            string_parameter(PARAM_DISPLAY_NAME, settings.entitlement_display_name)
        ],
        "purchaseOrderId": settings.purchase_order_id,
    }


def build_workspace_entitlement(offer: dict, settings: FlowSettings) -> dict:
    """Build an annual, auto-renewing commitment entitlement with a seat count."""
    return {
        "offer": offer["name"],
        "parameters": [int64_parameter(PARAM_NUM_UNITS, settings.num_units)],
        "commitmentSettings": {
            "renewalSettings": {
                "enableRenewal": True,
                "paymentPlan": PAYMENT_PLAN_COMMITMENT,
                "paymentCycle": {"periodType": PERIOD_TYPE_YEAR, "duration": 1},
            }
        },
        "purchaseOrderId": settings.purchase_order_id,
    }


def billing_account_from_entitlement(entitlement: dict) -> Optional[str]:
    """
    Return the Cloud Billing resource name provisioned for a GCP entitlement,
    or None if the entitlement has no provisioned service yet.
    """
    provisioning_id = entitlement.get("provisionedService", {}).get("provisioningId")
    if not provisioning_id:
        return None
    if provisioning_id.startswith(BILLING_ACCOUNT_PREFIX):
        return provisioning_id
    return f"{BILLING_ACCOUNT_PREFIX}{provisioning_id}"


# ---------------------------------------------------------------------------
# Site Verification
# ---------------------------------------------------------------------------


def build_site(domain: str) -> dict:
    return {"type": SITE_TYPE_DOMAIN, "identifier": domain}


def build_token_request(
    domain: str, method: str = VERIFICATION_METHOD_DNS_TXT
) -> dict:
    return {"site": build_site(domain), "verificationMethod": method}


def build_web_resource(domain: str, owners: list) -> dict:
    """
    Build a web resource for the domain.

    Listing the customer's admin as an owner propagates the verification
    status to the Workspace account right away.
    """
    return {"site": build_site(domain), "owners": list(owners)}
