"""
Flow settings loaded from environment variables and command-line overrides.

Every value the provisioning flows need (key file, reseller admin, account,
customer domain and the sample customer details) lives here instead of being
hardcoded in the flows.
"""

import os
import re
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from channel_common.exceptions import ConfigurationException

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
DOMAIN_PATTERN = re.compile(
    r"^(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,63}$"
)
ACCOUNT_ID_PATTERN = re.compile(r"^C[A-Za-z0-9]+$")

MAX_PURCHASE_ORDER_ID_LENGTH = 80

# Environment variable for each settings field
ENV_VARS = {
    "key_file": "CHANNEL_JSON_KEY_FILE",
    "reseller_admin_user": "CHANNEL_RESELLER_ADMIN_USER",
    "account_id": "CHANNEL_ACCOUNT_ID",
    "customer_domain": "CHANNEL_CUSTOMER_DOMAIN",
    "channel_partner_id": "CHANNEL_PARTNER_ID",
    "org_display_name": "CHANNEL_ORG_DISPLAY_NAME",
    "entitlement_display_name": "CHANNEL_ENTITLEMENT_DISPLAY_NAME",
    "purchase_order_id": "CHANNEL_PURCHASE_ORDER_ID",
    "num_units": "CHANNEL_NUM_UNITS",
    "alternate_email": "CHANNEL_ALTERNATE_EMAIL",
}


class PostalAddress(BaseModel):
    """Customer organization postal address."""

    address_lines: list[str] = Field(default_factory=lambda: ["1800 Amphibious Blvd"])
    postal_code: str = "94045"
    region_code: str = "US"


class FlowSettings(BaseModel):
    """
    Settings shared by the provisioning and verification flows.

    Required values have no default; everything else defaults to the sample
    customer used throughout the Channel Services codelabs.
    """

    key_file: str = Field(description="Path to the service account JSON key")
    reseller_admin_user: str = Field(
        description="Reseller admin impersonated through domain-wide delegation"
    )
    customer_domain: str = Field(description="Primary domain of the customer")
    account_id: Optional[str] = Field(
        default=None, description="Reseller account ID, e.g. C012345"
    )

    channel_partner_id: Optional[str] = Field(
        default=None, description="Channel partner link ID (distributors only)"
    )
    org_display_name: str = "Acme Corp"
    postal_address: PostalAddress = Field(default_factory=PostalAddress)

    # Recommended format: "[Reseller name] - [Customer name]"
    entitlement_display_name: str = "Reseller XYZ - Acme corp"
    purchase_order_id: str = "A codelab test"
    num_units: int = Field(default=5, ge=1)

    alternate_email: str = "john.doe@gmail.com"
    language_code: str = "en-US"
    admin_given_name: str = "John"
    admin_family_name: str = "Doe"

    model_config = ConfigDict(frozen=True)

    @field_validator("key_file")
    @classmethod
    def validate_key_file(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("key file path must not be empty")
        return v

    @field_validator("reseller_admin_user", "alternate_email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_PATTERN.match(v):
            raise ValueError(f"invalid email address: {v!r}")
        return v

    @field_validator("customer_domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        v = v.strip().lower()
        if not DOMAIN_PATTERN.match(v):
            raise ValueError(f"invalid domain: {v!r}")
        return v

    @field_validator("account_id")
    @classmethod
    def validate_account_id(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if v.startswith("accounts/"):
            v = v[len("accounts/"):]
        if not ACCOUNT_ID_PATTERN.match(v):
            raise ValueError(f"invalid reseller account ID: {v!r}")
        return v

    @field_validator("purchase_order_id")
    @classmethod
    def validate_purchase_order_id(cls, v: str) -> str:
        if len(v) > MAX_PURCHASE_ORDER_ID_LENGTH:
            raise ValueError(
                f"purchase order ID exceeds {MAX_PURCHASE_ORDER_ID_LENGTH} characters"
            )
        return v

    @property
    def account_name(self) -> str:
        """Reseller account resource name."""
        if not self.account_id:
            raise ConfigurationException(
                "Reseller account ID is required. Set CHANNEL_ACCOUNT_ID or pass --account-id."
            )
        return f"accounts/{self.account_id}"

    @property
    def customer_admin_email(self) -> str:
        return f"admin@{self.customer_domain}"

    @property
    def reseller_admin_member(self) -> str:
        return f"user:{self.reseller_admin_user}"

    @classmethod
    def from_env(
        cls,
        overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Dict[str, str]] = None,
        require_account: bool = True,
    ) -> "FlowSettings":
        """
        Build settings from environment variables.

        Args:
            overrides: Field values that take precedence over the environment
                (``None`` values are ignored)
            environ: Environment mapping, defaults to ``os.environ``
            require_account: Whether a reseller account ID is mandatory

        Returns:
            Validated FlowSettings

        Raises:
            ConfigurationException: If a required value is missing or invalid
        """
        environ = os.environ if environ is None else environ

        values: Dict[str, Any] = {}
        for field_name, env_var in ENV_VARS.items():
            value = environ.get(env_var)
            if value:
                values[field_name] = value

        # Fall back to the standard Google credentials variable
        if "key_file" not in values and environ.get("GOOGLE_APPLICATION_CREDENTIALS"):
            values["key_file"] = environ["GOOGLE_APPLICATION_CREDENTIALS"]

        for field_name, value in (overrides or {}).items():
            if value is not None:
                values[field_name] = value

        missing = [
            ENV_VARS[name]
            for name in ("key_file", "reseller_admin_user", "customer_domain")
            if not values.get(name)
        ]
        if require_account and not values.get("account_id"):
            missing.append(ENV_VARS["account_id"])
        if missing:
            raise ConfigurationException(
                f"Missing required settings: {', '.join(missing)}",
                details={"missing": missing},
            )

        try:
            settings = cls(**values)
        except ValidationError as e:
            raise ConfigurationException(
                f"Invalid settings: {e.error_count()} error(s)",
                details={"errors": e.errors(include_url=False)},
            ) from e

        logger.debug("Loaded settings for customer domain %s", settings.customer_domain)
        return settings
