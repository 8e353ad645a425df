"""
Salesforce OAuth 2.0 Authentication

Implements the OAuth 2.0 username-password flow with an in-memory token cache.
The suite runs in a single process for minutes at a time, so one token per
run is enough.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import httpx

from syndesis_qe.models.accounts import Account
from syndesis_qe.utils.exceptions import SalesforceAuthException
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)

# Salesforce sessions last two hours by default
TOKEN_TTL = timedelta(minutes=90)
DEFAULT_LOGIN_URL = "https://login.salesforce.com"


class SalesforceOAuth:
    """Salesforce OAuth 2.0 client with token management"""

    def __init__(
        self,
        account: Account,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.client_id = account.get_property("clientId")
        self.client_secret = account.get_property("clientSecret")
        self.username = account.get_property("userName")
        self.password = account.get_property("password")
        self.login_url = (account.get_property("loginUrl") or DEFAULT_LOGIN_URL).rstrip("/")
        self.token_url = f"{self.login_url}/services/oauth2/token"

        self.http_client = http_client or httpx.Client(timeout=timeout)

        self._access_token: Optional[str] = None
        self._instance_url: Optional[str] = account.get_property("instanceUrl")
        self._expiry: Optional[datetime] = None

    def get_access_token(self, force_refresh: bool = False) -> str:
        """
        Get valid access token, using cache when available.

        Args:
            force_refresh: Force token refresh even if cached token exists

        Returns:
            Valid access token

        Raises:
            SalesforceAuthException: If authentication fails
        """
        if not force_refresh and self._token_is_valid():
            logger.debug("Using cached Salesforce access token")
            return self._access_token

        logger.info("Acquiring new Salesforce access token")
        token_data = self._authenticate()

        self._access_token = token_data["access_token"]
        self._instance_url = token_data.get("instance_url", self._instance_url)
        self._expiry = datetime.now(timezone.utc) + TOKEN_TTL

        return self._access_token

    def get_instance_url(self) -> str:
        """
        Get Salesforce instance URL.

        Raises:
            SalesforceAuthException: If instance URL not available
        """
        if not self._token_is_valid():
            self.get_access_token()

        if not self._instance_url:
            raise SalesforceAuthException("Failed to retrieve instance URL")

        return self._instance_url.rstrip("/")

    def _token_is_valid(self) -> bool:
        if not self._access_token or not self._expiry:
            return False
        return datetime.now(timezone.utc) < self._expiry

    def _authenticate(self) -> Dict[str, str]:
        """
        Authenticate with Salesforce using OAuth 2.0 password flow.

        Returns:
            OAuth response with access_token and instance_url

        Raises:
            SalesforceAuthException: If authentication fails
        """
        data = {
            "grant_type": "password",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "username": self.username,
            "password": self.password,
        }

        logger.info(
            "Authenticating with Salesforce",
            extra={
                "token_url": self.token_url,
                "client_id": self.client_id[:10] + "..." if self.client_id else None,
            },
        )

        try:
            response = self.http_client.post(
                self.token_url,
                data=data,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()
            token_data = response.json()

        except httpx.HTTPStatusError as e:
            try:
                error_data = e.response.json()
            except ValueError:
                error_data = {"message": e.response.text}

            logger.error(
                f"Salesforce authentication failed with HTTP {e.response.status_code}",
                extra={"status_code": e.response.status_code, "error": error_data},
            )

            raise SalesforceAuthException(
                f"Authentication failed: {error_data.get('error_description', str(e))}",
                details={"status_code": e.response.status_code, "error": error_data},
            ) from e

        except httpx.RequestError as e:
            logger.error(f"Network error during authentication: {e}")
            raise SalesforceAuthException(
                f"Network error during authentication: {e}",
                details={"error": str(e)},
            ) from e

        if "access_token" not in token_data:
            raise SalesforceAuthException(
                "Invalid OAuth response: missing access_token",
                details={"response": token_data},
            )

        logger.info(
            "Successfully authenticated with Salesforce",
            extra={"instance_url": token_data.get("instance_url")},
        )

        return token_data

    def close(self) -> None:
        """Close HTTP client"""
        self.http_client.close()
