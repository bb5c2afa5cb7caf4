"""
Base flow class implementing Template Method pattern for provisioning programs.
Provides consistent client initialization, logging and resource reporting.
"""

from abc import ABC, abstractmethod
import json
import logging
import os
import sys
from typing import Any, Optional, TextIO

from channel_common.config import FlowSettings


class BaseFlow(ABC):
    """
    Abstract base class for provisioning flows with common functionality.

    API clients can be passed in explicitly; any client left out is built
    from the settings on first use.

    Subclasses must implement _execute() method with their specific steps.
    """

    def __init__(
        self,
        settings: FlowSettings,
        channel_client=None,
        billing_client=None,
        site_verification_client=None,
        out: Optional[TextIO] = None,
        log_level: Optional[str] = None,
    ):
        self.settings = settings
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.setLevel(log_level or os.getenv("LOG_LEVEL", "INFO"))
        self._channel_client = channel_client
        self._billing_client = billing_client
        self._site_verification_client = site_verification_client
        self.out = out or sys.stdout

    @property
    def channel_client(self):
        """Lazy initialization of Channel API client"""
        if self._channel_client is None:
            from channel_common.channel_client import get_channel_client

            self._channel_client = get_channel_client(self.settings)
        return self._channel_client

    @property
    def billing_client(self):
        """Lazy initialization of Cloud Billing API client"""
        if self._billing_client is None:
            from channel_common.billing_client import get_billing_client

            self._billing_client = get_billing_client(self.settings)
        return self._billing_client

    @property
    def site_verification_client(self):
        """Lazy initialization of Site Verification API client"""
        if self._site_verification_client is None:
            from channel_common.site_verification_client import (
                get_site_verification_client,
            )

            self._site_verification_client = get_site_verification_client(
                self.settings
            )
        return self._site_verification_client

    def run(self) -> dict:
        """
        Main entry point for a flow (Template Method).

        Errors are logged and re-raised; nothing is retried.

        Returns:
            Summary dict of the resources the flow created
        """
        self.logger.info(
            "Starting %s for domain %s",
            self.__class__.__name__,
            self.settings.customer_domain,
        )
        try:
            result = self._execute()
        except Exception as e:
            self.logger.error(f"Flow error: {e}", exc_info=True)
            raise
        self.logger.info("Flow completed successfully")
        return result

    @abstractmethod
    def _execute(self) -> dict:
        """
        Subclasses implement their specific steps here.

        Returns:
            Summary dict of the resources the flow created
        """
        pass

    def _report(self, title: str, resource: Any = None) -> None:
        """Print a status line and, if given, a JSON snapshot of a resource"""
        print(f"=== {title}", file=self.out)
        if resource is not None:
            print(json.dumps(resource, indent=2, default=str), file=self.out)
