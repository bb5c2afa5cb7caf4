"""
Cloud Billing API client wrapper for billing account IAM policies.
"""

import logging

from channel_common.config import FlowSettings
from channel_common.gcp_client import build_billing_service, execute

logger = logging.getLogger(__name__)


class BillingClient:
    """Client for the Cloud Billing API (cloudbilling v1)."""

    def __init__(self, service):
        self.service = service

    def get_iam_policy(self, billing_account: str) -> dict:
        """Fetch the IAM policy of a billing account ("billingAccounts/...")."""
        logger.debug("Fetching IAM policy for %s", billing_account)
        return execute(
            self.service.billingAccounts().getIamPolicy(resource=billing_account),
            "Get billing account IAM policy",
        )

    def set_iam_policy(self, billing_account: str, policy: dict) -> dict:
        """
        Replace the IAM policy of a billing account.

        The whole policy is written in one call; when the policy carries no
        etag the write is unconditional.
        """
        result = execute(
            self.service.billingAccounts().setIamPolicy(
                resource=billing_account, body={"policy": policy}
            ),
            "Set billing account IAM policy",
        )
        logger.info("Updated IAM policy for %s", billing_account)
        return result


def get_billing_client(settings: FlowSettings) -> BillingClient:
    """Factory function to create a Cloud Billing API client."""
    return BillingClient(build_billing_service(settings.key_file))
