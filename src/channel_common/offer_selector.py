"""
Offer selection from the reseller catalog.

Offer IDs vary from one reseller account to another, so the flows list the
whole catalog and pick the first offer for the SKU and plan they need.
This is fine for a sample but not a recommended model for a production
integration, which should store the offer names it sells.
"""

import logging
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def first_match(items: Iterable[T], predicate: Callable[[T], bool]) -> Optional[T]:
    """
    Return the first item satisfying predicate, or None if there is none.

    The iterable is consumed lazily and iteration stops at the first match,
    so a paginated source only fetches the pages it needs.
    """
    for item in items:
        if predicate(item):
            return item
    return None


def offer_display_name(offer: dict) -> str:
    """SKU marketing display name of an offer."""
    return offer.get("sku", {}).get("marketingInfo", {}).get("displayName", "")


def offer_payment_plan(offer: dict) -> str:
    """Payment plan of an offer (e.g. COMMITMENT, FLEXIBLE, TRIAL)."""
    return offer.get("plan", {}).get("paymentPlan", "")


def offer_matches(
    display_name: str, payment_plan: Optional[str] = None
) -> Callable[[dict], bool]:
    """
    Build a predicate matching offers by exact SKU display name and,
    optionally, exact payment plan.
    """

    def predicate(offer: dict) -> bool:
        if offer_display_name(offer) != display_name:
            return False
        return payment_plan is None or offer_payment_plan(offer) == payment_plan

    return predicate


def select_offer(
    offers: Iterable[dict], display_name: str, payment_plan: Optional[str] = None
) -> Optional[dict]:
    """
    Select the first offer for a SKU display name and optional plan.

    Returns:
        The matching offer dict unmodified, or None if the catalog has none
    """
    offer = first_match(offers, offer_matches(display_name, payment_plan))
    if offer is None:
        logger.warning(
            "No offer found for %s (plan: %s)", display_name, payment_plan or "any"
        )
    else:
        logger.info("Selected offer %s for %s", offer.get("name"), display_name)
    return offer
