"""
Custom exception classes for provisioning flows.
Provides structured error handling across all flows.
"""


class ProvisioningException(Exception):
    """Base exception for all provisioning operations"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationException(ProvisioningException):
    """Raised when flow settings are missing or invalid"""

    pass


class AuthException(ProvisioningException):
    """Raised when service account credentials cannot be loaded or refreshed"""

    pass


class RemoteCallException(ProvisioningException):
    """Raised when a Channel, Billing or Site Verification API call fails"""

    def __init__(self, message: str, details: dict = None, status: int = None):
        super().__init__(message, details)
        self.status = status


class OperationFailedException(RemoteCallException):
    """Raised when a long-running operation finishes with an error"""

    def __init__(self, message: str, operation_name: str, error: dict = None):
        error = error or {}
        super().__init__(
            message, details={"operation": operation_name, "error": error}
        )
        self.operation_name = operation_name
        # google.rpc.Status code, not an HTTP status
        self.code = error.get("code")


class OperationTimeoutException(RemoteCallException):
    """Raised when waiting on a long-running operation exceeds its timeout"""

    def __init__(self, message: str, operation_name: str, timeout: float):
        super().__init__(
            message, details={"operation": operation_name, "timeout": timeout}
        )
        self.operation_name = operation_name
        self.timeout = timeout


class PreconditionException(ProvisioningException):
    """Raised when the account state does not allow the flow to continue"""

    pass


class OfferNotFoundException(PreconditionException):
    """Raised when no offer in the catalog matches the requested SKU and plan"""

    pass


class CloudIdentityExistsException(PreconditionException):
    """Raised when the customer domain already has a cloud identity"""

    def __init__(self, message: str, domain: str, accounts: list = None):
        super().__init__(message, details={"domain": domain, "accounts": accounts or []})
        self.domain = domain
        self.accounts = accounts or []
