"""
Pytest configuration: adds src/ to the path so all modules can be imported,
and provides shared settings and mock client fixtures.
"""

import sys
import os
from unittest.mock import MagicMock

import pytest

# Add the src directory so flow modules can be imported without installing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from channel_common.config import FlowSettings  # noqa: E402


@pytest.fixture
def settings():
    """Settings for the sample reseller and customer"""
    return FlowSettings(
        key_file="path/to/json_key_file.json",
        reseller_admin_user="admin@yourresellerdomain.com",
        account_id="C012345",
        customer_domain="example.com",
    )


@pytest.fixture
def mock_channel_client():
    """Mock ChannelClient"""
    return MagicMock()


@pytest.fixture
def mock_billing_client():
    """Mock BillingClient"""
    return MagicMock()


@pytest.fixture
def mock_site_verification_client():
    """Mock SiteVerificationClient"""
    return MagicMock()


def make_operation(result=None, error=None):
    """Mock LongRunningOperation whose result() returns or raises"""
    operation = MagicMock()
    if error is not None:
        operation.result.side_effect = error
    else:
        operation.result.return_value = result
    return operation


def make_offer(name, display_name, payment_plan="FLEXIBLE"):
    """Offer resource as returned by accounts.offers.list"""
    return {
        "name": f"accounts/C012345/offers/{name}",
        "sku": {
            "name": f"products/prod/skus/{name}",
            "marketingInfo": {"displayName": display_name},
        },
        "plan": {"paymentPlan": payment_plan},
    }
