"""
Site Verification API client wrapper for domain ownership checks.

A verification token is requested for a domain, placed by the operator in
the domain's DNS as a TXT record, and the domain is then inserted as a
verified web resource.
"""

import logging

from channel_common.config import FlowSettings
from channel_common.exceptions import RemoteCallException
from channel_common.gcp_client import build_site_verification_service, execute
from channel_common.mappers import (
    VERIFICATION_METHOD_DNS_TXT,
    build_token_request,
    build_web_resource,
)

logger = logging.getLogger(__name__)


class SiteVerificationClient:
    """Client for the Site Verification API (siteVerification v1)."""

    def __init__(self, service):
        self.service = service

    def get_token(self, domain: str, method: str = VERIFICATION_METHOD_DNS_TXT) -> str:
        """
        Request a verification token for a domain.

        Args:
            domain: Domain to verify
            method: Verification method, DNS_TXT by default

        Returns:
            Token to publish for the domain

        Raises:
            RemoteCallException: If the response carries no token
        """
        response = execute(
            self.service.webResource().getToken(body=build_token_request(domain, method)),
            "Get site verification token",
        )
        token = response.get("token")
        if not token:
            raise RemoteCallException(
                f"Get site verification token returned no token for {domain}",
                details={"call": "Get site verification token", "domain": domain},
            )
        logger.info("Received %s verification token for %s", method, domain)
        return token

    def insert(
        self, domain: str, owners: list, method: str = VERIFICATION_METHOD_DNS_TXT
    ) -> dict:
        """
        Verify a domain and register it as a web resource.

        Fails with RemoteCallException if the token is not published yet.
        """
        resource = execute(
            self.service.webResource().insert(
                verificationMethod=method, body=build_web_resource(domain, owners)
            ),
            "Insert web resource",
        )
        logger.info("Domain %s verified", domain)
        return resource


def get_site_verification_client(settings: FlowSettings) -> SiteVerificationClient:
    """Factory function to create a Site Verification API client for the reseller admin."""
    return SiteVerificationClient(
        build_site_verification_service(settings.key_file, settings.reseller_admin_user)
    )
