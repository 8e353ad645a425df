"""
Syndesis Management REST API Service

Thin clients for the connectors, connections and integrations endpoints plus
the test-support endpoint used to reset the platform database between runs.
All endpoints share one authenticated HTTP client.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

import httpx

from syndesis_qe.models.syndesis import Connection, Connector, Integration, SyndesisModel
from syndesis_qe.utils.exceptions import SyndesisAPIException
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)

# The API rejects state-changing requests without this header
XSRF_HEADER = "SYNDESIS-XSRF-TOKEN"
XSRF_VALUE = "awesome"

M = TypeVar("M", bound=SyndesisModel)


class SyndesisClient:
    """Authenticated HTTP client for the management API"""

    def __init__(
        self,
        api_url: str,
        token: str,
        user: str = "pista",
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.http_client = httpx.Client(
            base_url=self.api_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {token}",
                "X-Forwarded-User": user,
                "X-Forwarded-Access-Token": token,
                XSRF_HEADER: XSRF_VALUE,
                "Accept": "application/json",
            },
        )

    def request(
        self,
        method: str,
        path: str,
        json_data: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make a request against the management API.

        Args:
            method: HTTP method
            path: Path relative to /api/v1
            json_data: Optional JSON body

        Returns:
            Decoded JSON body, or None when the response has no content

        Raises:
            SyndesisAPIException: On network errors and non-2xx responses
        """
        try:
            response = self.http_client.request(method, path, json=json_data)
        except httpx.RequestError as e:
            logger.error(f"Network error calling Syndesis API: {e}")
            raise SyndesisAPIException(
                f"Network error: {e}", details={"error": str(e), "path": path}
            ) from e

        if response.status_code >= 400:
            logger.error(
                f"Syndesis API error: {response.status_code}",
                extra={"status_code": response.status_code, "path": path, "method": method},
            )
            raise SyndesisAPIException(
                f"Syndesis API error on {method} {path}: {response.text}",
                status_code=response.status_code,
                details={"path": path, "method": method},
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def close(self) -> None:
        """Close HTTP client"""
        self.http_client.close()


class AbstractEndpoint(Generic[M]):
    """CRUD operations on one resource collection"""

    resource: str = ""
    model: Type[M]

    def __init__(self, client: SyndesisClient):
        self.client = client

    def list(self) -> List[M]:
        data = self.client.request("GET", f"/{self.resource}")
        items = data.get("items", []) if isinstance(data, dict) else data or []
        return [self.model.model_validate(item) for item in items]

    def get(self, resource_id: str) -> M:
        data = self.client.request("GET", f"/{self.resource}/{resource_id}")
        return self.model.model_validate(data)

    def create(self, obj: M) -> M:
        data = self.client.request("POST", f"/{self.resource}", json_data=obj.to_api())
        return self.model.model_validate(data)

    def update(self, resource_id: str, obj: M) -> None:
        self.client.request("PUT", f"/{self.resource}/{resource_id}", json_data=obj.to_api())

    def delete(self, resource_id: str) -> None:
        self.client.request("DELETE", f"/{self.resource}/{resource_id}")


class ConnectorsEndpoint(AbstractEndpoint[Connector]):
    resource = "connectors"
    model = Connector


class ConnectionsEndpoint(AbstractEndpoint[Connection]):
    resource = "connections"
    model = Connection


class IntegrationsEndpoint(AbstractEndpoint[Integration]):
    resource = "integrations"
    model = Integration


class TestSupport:
    """Test-support endpoint of the platform"""

    # Not a pytest test class
    __test__ = False

    def __init__(self, client: SyndesisClient):
        self.client = client

    def reset_db(self) -> None:
        """Drop everything the platform stored and reload its defaults."""
        logger.info("Resetting Syndesis database")
        self.client.request("GET", "/test-support/reset-db")
