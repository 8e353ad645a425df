"""
Salesforce REST API Service

Wrapper for the Salesforce REST API operations the suite needs: SOQL queries
and record deletion. Calls are made once; failures are raised to the caller.
"""

from typing import Any, Dict, List, Optional

import httpx

from syndesis_qe.auth.salesforce_oauth import SalesforceOAuth
from syndesis_qe.models.salesforce_records import CONTACT_FIELDS, SalesforceContact
from syndesis_qe.utils.exceptions import SalesforceAPIException
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)


def escape_soql(value: str) -> str:
    """Escape a value for use inside a single-quoted SOQL literal"""
    return value.replace("\\", "\\\\").replace("'", "\\'")


class SalesforceService:
    """Service for interacting with Salesforce REST API."""

    def __init__(
        self,
        oauth: SalesforceOAuth,
        api_version: str = "v41.0",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.oauth = oauth
        self.api_version = api_version
        self.http_client = http_client or httpx.Client(timeout=timeout)

    def _get_api_url(self, endpoint: str = "") -> str:
        instance_url = self.oauth.get_instance_url()
        base_url = f"{instance_url}/services/data/{self.api_version}"
        return f"{base_url}/{endpoint.lstrip('/')}" if endpoint else base_url

    def _get_headers(self) -> Dict[str, str]:
        access_token = self.oauth.get_access_token()
        return {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make authenticated HTTP request to Salesforce API.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: API endpoint
            json_data: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON body, or None for 204 responses

        Raises:
            SalesforceAPIException: If request fails
            SalesforceAuthException: If authentication fails
        """
        url = self._get_api_url(endpoint)
        headers = self._get_headers()

        try:
            response = self.http_client.request(
                method=method,
                url=url,
                headers=headers,
                json=json_data,
                params=params,
            )
        except httpx.RequestError as e:
            logger.error(f"Network error calling Salesforce API: {e}")
            raise SalesforceAPIException(
                f"Network error: {e}",
                details={"error": str(e), "endpoint": endpoint},
            ) from e

        if response.status_code >= 400:
            try:
                error_data = response.json()
            except ValueError:
                error_data = {"message": response.text}

            logger.error(
                f"Salesforce API error: {response.status_code}",
                extra={
                    "status_code": response.status_code,
                    "endpoint": endpoint,
                    "error": error_data,
                },
            )

            raise SalesforceAPIException(
                f"Salesforce API error: {error_data}",
                status_code=response.status_code,
                details={"error": error_data, "endpoint": endpoint},
            )

        if response.status_code != 204:
            return response.json()

        return None

    def query(self, soql: str) -> List[Dict[str, Any]]:
        """
        Run a SOQL query.

        Args:
            soql: Query string

        Returns:
            Records of the first result page
        """
        logger.debug("Running SOQL query", extra={"soql": soql})
        result = self._request("GET", "query", params={"q": soql})
        return result.get("records", [])

    def get_contact_by_screen_name(self, screen_name: str) -> Optional[SalesforceContact]:
        """
        Find the contact created for a twitter screen name.

        Args:
            screen_name: Value of TwitterScreenName__c

        Returns:
            The first matching contact, or None
        """
        soql = (
            f"SELECT {','.join(CONTACT_FIELDS)} FROM Contact "
            f"WHERE TwitterScreenName__c = '{escape_soql(screen_name)}'"
        )
        records = self.query(soql)
        if not records:
            return None
        return SalesforceContact.model_validate(records[0])

    def delete_sobject(self, sobject_type: str, record_id: str) -> None:
        """
        Delete a record.

        Args:
            sobject_type: Object API name, e.g. Contact
            record_id: Salesforce record ID
        """
        self._request("DELETE", f"sobjects/{sobject_type}/{record_id}")
        logger.info(
            f"Deleted Salesforce {sobject_type}",
            extra={"sobject_type": sobject_type, "record_id": record_id},
        )

    def delete_contact_by_screen_name(self, screen_name: str) -> bool:
        """
        Delete the contact for a twitter screen name if it exists.

        Returns:
            True if a contact was deleted
        """
        contact = self.get_contact_by_screen_name(screen_name)
        if contact is None:
            logger.debug(f"No Salesforce contact for @{screen_name}")
            return False

        logger.info(
            "Deleting salesforce contact",
            extra={"contact": contact.model_dump()},
        )
        self.delete_sobject("Contact", contact.Id)
        return True

    def close(self) -> None:
        """Close HTTP client"""
        self.http_client.close()
