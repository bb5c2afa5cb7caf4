"""
Google API client factory for Channel, Cloud Billing and Site Verification.
All API calls are made through discovery clients authenticated with a
service account, impersonating the reseller admin where the API requires it.
"""

import logging
from typing import Optional, Sequence

import httplib2
from google.auth import exceptions as auth_exceptions
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from channel_common.exceptions import AuthException, RemoteCallException

logger = logging.getLogger(__name__)

# Cloud Channel API constants
CHANNEL_API_SERVICE = "cloudchannel"
CHANNEL_API_VERSION = "v1"
CHANNEL_SCOPES = ["https://www.googleapis.com/auth/apps.order"]

# Cloud Billing API constants
BILLING_API_SERVICE = "cloudbilling"
BILLING_API_VERSION = "v1"
BILLING_SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]

# Site Verification API constants
SITE_VERIFICATION_API_SERVICE = "siteVerification"
SITE_VERIFICATION_API_VERSION = "v1"
SITE_VERIFICATION_SCOPES = ["https://www.googleapis.com/auth/siteverification"]


def get_credentials(
    key_path: str, scopes: Sequence[str], subject: Optional[str] = None
):
    """
    Load service account credentials, optionally impersonating a user.

    Args:
        key_path: Path to service account JSON key file
        scopes: OAuth scopes to request
        subject: Email of the user to impersonate via domain-wide delegation

    Returns:
        Service account credentials object

    Raises:
        AuthException: If the key file is missing, unreadable or invalid
    """
    if not key_path:
        raise AuthException("Service account key path is required")

    logger.info(f"Loading service account credentials from: {key_path}")

    try:
        credentials = service_account.Credentials.from_service_account_file(
            key_path, scopes=list(scopes)
        )
    except OSError as e:
        raise AuthException(
            f"Cannot read service account key {key_path}: {e}",
            details={"key_path": key_path},
        ) from e
    except (ValueError, KeyError, auth_exceptions.GoogleAuthError) as e:
        raise AuthException(
            f"Invalid service account key {key_path}: {e}",
            details={"key_path": key_path},
        ) from e

    if subject:
        logger.info("Impersonating %s", subject)
        credentials = credentials.with_subject(subject)

    return credentials


def _build_service(service_name: str, version: str, credentials):
    service = build(
        service_name,
        version,
        credentials=credentials,
        cache_discovery=False,
    )
    logger.info("%s %s API client created successfully", service_name, version)
    return service


def build_channel_service(key_path: str, reseller_admin_user: str):
    """Return a Cloud Channel API client acting as the reseller admin."""
    credentials = get_credentials(key_path, CHANNEL_SCOPES, subject=reseller_admin_user)
    return _build_service(CHANNEL_API_SERVICE, CHANNEL_API_VERSION, credentials)


def build_billing_service(key_path: str):
    """Return a Cloud Billing API client acting as the service account itself."""
    credentials = get_credentials(key_path, BILLING_SCOPES)
    return _build_service(BILLING_API_SERVICE, BILLING_API_VERSION, credentials)


def build_site_verification_service(key_path: str, reseller_admin_user: str):
    """Return a Site Verification API client acting as the reseller admin."""
    credentials = get_credentials(
        key_path, SITE_VERIFICATION_SCOPES, subject=reseller_admin_user
    )
    return _build_service(
        SITE_VERIFICATION_API_SERVICE, SITE_VERIFICATION_API_VERSION, credentials
    )


def execute(request, description: str) -> dict:
    """
    Execute a discovery request, translating client errors.

    Args:
        request: googleapiclient HttpRequest
        description: Short human-readable name of the call, used in errors

    Returns:
        Parsed JSON response (empty dict for empty bodies)

    Raises:
        RemoteCallException: If the API returns an error status or cannot be reached
        AuthException: If the credentials cannot be refreshed
    """
    try:
        response = request.execute()
    except HttpError as e:
        status = getattr(e.resp, "status", None)
        reason = getattr(e, "reason", None) or str(e)
        raise RemoteCallException(
            f"{description} failed: {reason}",
            details={"call": description, "status": status, "reason": reason},
            status=int(status) if status is not None else None,
        ) from e
    except auth_exceptions.RefreshError as e:
        raise AuthException(
            f"{description} failed: could not refresh credentials: {e}",
            details={"call": description},
        ) from e
    except (OSError, httplib2.HttpLib2Error, auth_exceptions.TransportError) as e:
        raise RemoteCallException(
            f"{description} failed: {e.__class__.__name__}: {e}",
            details={"call": description, "error": str(e)},
        ) from e

    return response or {}
