"""
Account Models

Third-party credentials used by the suite. The accounts file maps a logical
account name to the service it belongs to and its credential properties:

    {
        "twitter_listen": {
            "service": "twitter",
            "properties": {"screenName": "...", "consumerKey": "..."}
        }
    }
"""

import json
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from syndesis_qe.utils.exceptions import AccountNotFoundException, ConfigurationException
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)


class Account(BaseModel):
    """Named bag of credential properties"""

    model_config = ConfigDict(frozen=True)

    service: Optional[str] = None
    properties: Dict[str, str] = Field(default_factory=dict)

    def get_property(self, key: str) -> Optional[str]:
        return self.properties.get(key)

    def require_property(self, key: str) -> str:
        value = self.properties.get(key)
        if value is None:
            raise ConfigurationException(
                f"Account property '{key}' is not set",
                details={"service": self.service, "property": key},
            )
        return value


class AccountsDirectory:
    """Read-only lookup of accounts by name"""

    def __init__(self, accounts: Optional[Dict[str, Account]] = None):
        self._accounts: Dict[str, Account] = dict(accounts or {})

    @classmethod
    def load(cls, path: Union[str, Path]) -> "AccountsDirectory":
        """
        Load accounts from a JSON file.

        Args:
            path: Location of the accounts file

        Returns:
            Populated directory

        Raises:
            ConfigurationException: If the file is missing or malformed
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise ConfigurationException(
                f"Accounts file not found: {path}", details={"path": str(path)}
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationException(
                f"Accounts file is not valid JSON: {path}",
                details={"path": str(path), "error": str(e)},
            ) from e

        if not isinstance(raw, dict):
            raise ConfigurationException(
                f"Accounts file must contain a JSON object: {path}",
                details={"path": str(path)},
            )

        accounts = {name: Account.model_validate(data) for name, data in raw.items()}
        logger.info(
            f"Loaded {len(accounts)} accounts from {path}",
            extra={"accounts": sorted(accounts)},
        )
        return cls(accounts)

    def get_account(self, name: str) -> Optional[Account]:
        return self._accounts.get(name)

    def require(self, name: str) -> Account:
        """Get an account or fail the run if it is not configured."""
        account = self._accounts.get(name)
        if account is None:
            raise AccountNotFoundException(name)
        return account

    def __contains__(self, name: object) -> bool:
        return name in self._accounts

    def __iter__(self) -> Iterator[str]:
        return iter(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)
