"""
Custom Exception Classes

Defines suite-specific exceptions for collaborator failures and scenario checks.
"""

from typing import Any, Dict, Optional


class SyndesisQEException(Exception):
    """Base exception for all suite errors"""

    def __init__(
        self,
        message: str,
        error_code: str = "SYNDESIS_QE_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationException(SyndesisQEException):
    """Configuration or environment errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFIG_ERROR", details=details)


class AccountNotFoundException(ConfigurationException):
    """Requested account is missing from the accounts file"""

    def __init__(self, name: str):
        super().__init__(f"Account '{name}' not found", details={"account": name})


class SyndesisAPIException(SyndesisQEException):
    """Management REST API call errors"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if status_code:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, error_code="SYNDESIS_API_ERROR", details=details)


class SalesforceException(SyndesisQEException):
    """Salesforce API related errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="SALESFORCE_ERROR", details=details)


class SalesforceAuthException(SalesforceException):
    """Salesforce OAuth authentication errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            details={**(details or {}), "auth_failed": True},
        )


class SalesforceAPIException(SalesforceException):
    """Salesforce REST API call errors"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if status_code:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details=details)


class TwitterException(SyndesisQEException):
    """Twitter API related errors"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if status_code:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, error_code="TWITTER_ERROR", details=details)


class GitHubException(SyndesisQEException):
    """GitHub API related errors"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if status_code:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, error_code="GITHUB_ERROR", details=details)


class ScenarioAssertionError(AssertionError):
    """A scenario check did not hold"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)
