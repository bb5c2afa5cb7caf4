"""
Flow: provision a Google Workspace customer through Channel Services.

Steps:
1. Select the first "Google Workspace Business Standard" offer on a
   COMMITMENT plan
2. Stop if the domain already has a cloud identity (the customer would
   have to be transferred instead, which this flow does not do)
3. Create the customer and provision its cloud identity
4. Create an annual commitment entitlement for a number of seats
5. Report the Admin SDK customer ID
"""

from typing import Optional, Sequence

from channel_common.base_flow import BaseFlow
from channel_common.cli import run_main
from channel_common.exceptions import (
    CloudIdentityExistsException,
    OfferNotFoundException,
)
from channel_common.mappers import (
    PAYMENT_PLAN_COMMITMENT,
    build_cloud_identity_request,
    build_customer,
    build_workspace_entitlement,
)
from channel_common.offer_selector import select_offer

WORKSPACE_SKU_DISPLAY_NAME = "Google Workspace Business Standard"


class WorkspaceProvisioningFlow(BaseFlow):
    """Creates a Workspace customer with a cloud identity and a commitment entitlement."""

    def _execute(self) -> dict:
        offer = self.select_offer()
        self.check_exists()
        customer = self.create_customer()
        entitlement = self.create_entitlement(customer, offer)

        admin_sdk_customer_id = customer.get("cloudIdentityId")
        self._report(f"Admin SDK customer ID: {admin_sdk_customer_id}")

        return {
            "offer": offer["name"],
            "customer": customer["name"],
            "entitlement": entitlement.get("name"),
            "cloudIdentityId": admin_sdk_customer_id,
        }

    def select_offer(self) -> dict:
        offers = self.channel_client.iter_offers(self.settings.account_name)
        offer = select_offer(offers, WORKSPACE_SKU_DISPLAY_NAME, PAYMENT_PLAN_COMMITMENT)
        if offer is None:
            raise OfferNotFoundException(
                f"No {WORKSPACE_SKU_DISPLAY_NAME} {PAYMENT_PLAN_COMMITMENT} offer "
                f"available to {self.settings.account_name}",
                details={
                    "sku": WORKSPACE_SKU_DISPLAY_NAME,
                    "plan": PAYMENT_PLAN_COMMITMENT,
                },
            )

        self._report("Selected offer", offer)
        return offer

    def check_exists(self) -> None:
        """Raise CloudIdentityExistsException if the domain already has a cloud identity."""
        domain = self.settings.customer_domain
        accounts = self.channel_client.check_cloud_identity_accounts_exist(
            self.settings.account_name, domain
        )
        if accounts:
            raise CloudIdentityExistsException(
                "Cloud identity already exists. Customer must be transferred, "
                "which is not supported by this flow",
                domain=domain,
                accounts=accounts,
            )

    def create_customer(self) -> dict:
        """
        Create the customer, then provision its cloud identity.

        Returns:
            The customer as returned by the cloud identity operation
        """
        customer = self.channel_client.create_customer(
            self.settings.account_name, build_customer(self.settings)
        )
        self._report(f"Created customer with id {customer['name']}", customer)

        operation = self.channel_client.provision_cloud_identity(
            customer["name"], build_cloud_identity_request(self.settings)
        )
        customer = operation.result()

        self._report("Provisioned cloud identity")
        return customer

    def create_entitlement(self, customer: dict, offer: dict) -> dict:
        operation = self.channel_client.create_entitlement(
            customer["name"], build_workspace_entitlement(offer, self.settings)
        )
        entitlement = operation.result()

        self._report("Created entitlement", entitlement)
        return entitlement


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console entry point."""
    return run_main(
        WorkspaceProvisioningFlow,
        argv,
        "Provision a Google Workspace customer through Channel Services.",
    )


if __name__ == "__main__":
    raise SystemExit(main())
