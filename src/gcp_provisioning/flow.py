"""
Flow: provision a Google Cloud Platform customer through Channel Services.

Steps:
1. Select the first "Google Cloud Platform" offer in the reseller catalog
2. Create the customer
3. Create the entitlement and wait for the long-running operation
4. Grant the reseller admin roles/billing.user on the billing account
   provisioned for the entitlement

Not needed for a production integration: step 4 only shows how the
billing account of the new customer can be managed through Cloud Billing.
"""

from typing import Optional, Sequence

from channel_common.base_flow import BaseFlow
from channel_common.cli import run_main
from channel_common.exceptions import OfferNotFoundException, PreconditionException
from channel_common.iam import add_member_to_role
from channel_common.mappers import (
    billing_account_from_entitlement,
    build_customer,
    build_gcp_entitlement,
)
from channel_common.offer_selector import select_offer

GCP_SKU_DISPLAY_NAME = "Google Cloud Platform"
BILLING_USER_ROLE = "roles/billing.user"


class GcpProvisioningFlow(BaseFlow):
    """Creates a GCP customer, its entitlement and a billing account grant."""

    def _execute(self) -> dict:
        offer = self.select_offer()
        customer = self.create_customer()
        entitlement = self.create_entitlement(customer, offer)
        policy = self.set_iam_policy(entitlement)

        return {
            "offer": offer["name"],
            "customer": customer["name"],
            "entitlement": entitlement.get("name"),
            "billingAccount": billing_account_from_entitlement(entitlement),
            "bindings": len(policy.get("bindings", [])),
        }

    def select_offer(self) -> dict:
        offers = self.channel_client.iter_offers(self.settings.account_name)
        offer = select_offer(offers, GCP_SKU_DISPLAY_NAME)
        if offer is None:
            raise OfferNotFoundException(
                f"No {GCP_SKU_DISPLAY_NAME} offer available to {self.settings.account_name}",
                details={"sku": GCP_SKU_DISPLAY_NAME},
            )

        self._report("Selected offer", offer)
        return offer

    def create_customer(self) -> dict:
        customer = self.channel_client.create_customer(
            self.settings.account_name, build_customer(self.settings)
        )

        self._report(f"Created customer with id {customer['name']}", customer)
        return customer

    def create_entitlement(self, customer: dict, offer: dict) -> dict:
        operation = self.channel_client.create_entitlement(
            customer["name"], build_gcp_entitlement(offer, self.settings)
        )
        entitlement = operation.result()

        self._report("Created entitlement", entitlement)
        return entitlement

    def set_iam_policy(self, entitlement: dict) -> dict:
        """
        Grant the reseller admin roles/billing.user on the customer's
        billing account.

        Returns:
            The policy written back to Cloud Billing
        """
        billing_account = billing_account_from_entitlement(entitlement)
        if billing_account is None:
            raise PreconditionException(
                "Entitlement has no provisioned billing account",
                details={"entitlement": entitlement.get("name")},
            )

        policy = self.billing_client.get_iam_policy(billing_account)
        new_policy = add_member_to_role(
            policy, BILLING_USER_ROLE, self.settings.reseller_admin_member
        )
        self.billing_client.set_iam_policy(billing_account, new_policy)

        self._report("Set IAM policy", new_policy)
        return new_policy


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console entry point."""
    return run_main(
        GcpProvisioningFlow,
        argv,
        "Provision a Google Cloud Platform customer through Channel Services.",
    )


if __name__ == "__main__":
    raise SystemExit(main())
