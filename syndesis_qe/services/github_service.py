"""
GitHub API Service

Removes repositories the platform pushes integration sources to.
"""

from typing import List, Optional

import httpx

from syndesis_qe.models.accounts import Account
from syndesis_qe.utils.exceptions import GitHubException
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)


class GitHubService:
    """Service for managing repositories of the github account."""

    def __init__(
        self,
        account: Account,
        api_url: str = "https://api.github.com",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 30.0,
    ):
        self.login = account.get_property("login")
        self.http_client = http_client or httpx.Client(
            base_url=api_url,
            timeout=timeout,
            headers={
                "Authorization": f"token {account.get_property('token')}",
                "Accept": "application/vnd.github+json",
            },
        )

    def delete_repositories(self, *full_names: str) -> List[str]:
        """
        Delete repositories by "owner/name".

        Repositories that do not exist are skipped.

        Returns:
            Names of the repositories that were deleted
        """
        deleted = []
        for full_name in full_names:
            try:
                response = self.http_client.delete(f"/repos/{full_name}")
            except httpx.RequestError as e:
                raise GitHubException(
                    f"Network error: {e}", details={"repository": full_name}
                ) from e

            if response.status_code == 404:
                logger.debug(f"Repository {full_name} does not exist")
                continue

            if response.status_code >= 400:
                raise GitHubException(
                    f"Cannot delete repository {full_name}: {response.text}",
                    status_code=response.status_code,
                    details={"repository": full_name},
                )

            logger.info(f"Deleted repository {full_name}")
            deleted.append(full_name)

        return deleted

    def close(self) -> None:
        """Close HTTP client"""
        self.http_client.close()
