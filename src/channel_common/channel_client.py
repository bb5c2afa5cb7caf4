"""
Cloud Channel API client wrapper for reseller provisioning.

Wraps the discovery client so flows deal in plain resource dicts:
paginated offer listing, customer creation, cloud identity checks and
provisioning, and entitlement creation. Calls that return a long-running
operation give back a LongRunningOperation to wait on.
"""

import logging
from typing import Iterator

from channel_common.config import FlowSettings
from channel_common.gcp_client import build_channel_service, execute
from channel_common.operations import DEFAULT_POLL_INTERVAL, LongRunningOperation

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class ChannelClient:
    """
    Client for the Cloud Channel API (cloudchannel v1).

    Args:
        service: Discovery client built by build_channel_service
        poll_interval: Initial delay between long-running operation polls
    """

    def __init__(self, service, poll_interval: float = DEFAULT_POLL_INTERVAL):
        self.service = service
        self.poll_interval = poll_interval

    # ------------------------------------------------------------------
    # Offers
    # ------------------------------------------------------------------

    def iter_offers(
        self, account_name: str, page_size: int = DEFAULT_PAGE_SIZE
    ) -> Iterator[dict]:
        """
        Yield every offer available to the reseller account.

        Pages are requested lazily, following nextPageToken until the
        listing is exhausted.

        Args:
            account_name: Reseller account resource name ("accounts/C012345")
            page_size: Offers requested per page
        """
        page_token = None
        page = 0

        while True:
            kwargs = {"parent": account_name, "pageSize": page_size}
            if page_token:
                kwargs["pageToken"] = page_token

            response = execute(
                self.service.accounts().offers().list(**kwargs), "List offers"
            )
            page += 1
            offers = response.get("offers", [])
            logger.debug("Offers page %d returned %d offers", page, len(offers))
            yield from offers

            page_token = response.get("nextPageToken")
            if not page_token:
                break

    # ------------------------------------------------------------------
    # Customers
    # ------------------------------------------------------------------

    def create_customer(self, account_name: str, customer: dict) -> dict:
        """Create a customer under the reseller account."""
        result = execute(
            self.service.accounts()
            .customers()
            .create(parent=account_name, body=customer),
            "Create customer",
        )
        logger.info("Created customer: %s", result.get("name"))
        return result

    def check_cloud_identity_accounts_exist(
        self, account_name: str, domain: str
    ) -> list[dict]:
        """
        Return the cloud identity accounts already associated with a domain.

        An empty list means the domain is free to be provisioned.
        """
        response = execute(
            self.service.accounts().checkCloudIdentityAccountsExist(
                parent=account_name, body={"domain": domain}
            ),
            "Check cloud identity accounts",
        )
        accounts = response.get("cloudIdentityAccounts", [])
        logger.info("Found %d cloud identity accounts for %s", len(accounts), domain)
        return accounts

    def provision_cloud_identity(
        self, customer_name: str, request: dict
    ) -> LongRunningOperation:
        """Start provisioning the cloud identity of a customer."""
        operation = execute(
            self.service.accounts()
            .customers()
            .provisionCloudIdentity(customer=customer_name, body=request),
            "Provision cloud identity",
        )
        return self._operation(operation, "Cloud identity provisioning")

    # ------------------------------------------------------------------
    # Entitlements
    # ------------------------------------------------------------------

    def create_entitlement(
        self, customer_name: str, entitlement: dict
    ) -> LongRunningOperation:
        """Start creating an entitlement for a customer."""
        operation = execute(
            self.service.accounts()
            .customers()
            .entitlements()
            .create(parent=customer_name, body={"entitlement": entitlement}),
            "Create entitlement",
        )
        return self._operation(operation, "Entitlement creation")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get_operation(self, name: str) -> dict:
        """Fetch the latest state of a long-running operation."""
        return execute(
            self.service.operations().get(name=name), "Get operation"
        )

    def _operation(self, operation: dict, description: str) -> LongRunningOperation:
        logger.info("%s started: %s", description, operation.get("name"))
        return LongRunningOperation(
            operation,
            refresh=self.get_operation,
            description=description,
            poll_interval=self.poll_interval,
        )


def get_channel_client(settings: FlowSettings) -> ChannelClient:
    """
    Factory function to create a Channel API client for the reseller admin.

    Returns:
        ChannelClient instance
    """
    return ChannelClient(
        build_channel_service(settings.key_file, settings.reseller_admin_user)
    )
