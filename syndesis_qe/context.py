"""
Scenario Context

Holds every collaborator a scenario talks to. Scenarios receive a context
instead of building clients themselves, so tests can pass fakes.
"""

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Optional

from syndesis_qe.auth.salesforce_oauth import SalesforceOAuth
from syndesis_qe.config import Settings
from syndesis_qe.models.accounts import AccountsDirectory
from syndesis_qe.services.github_service import GitHubService
from syndesis_qe.services.salesforce_service import SalesforceService
from syndesis_qe.services.syndesis_service import (
    ConnectionsEndpoint,
    ConnectorsEndpoint,
    IntegrationsEndpoint,
    SyndesisClient,
    TestSupport,
)
from syndesis_qe.services.twitter_service import TwitterService
from syndesis_qe.utils.logging_config import get_logger

logger = get_logger(__name__)

TWITTER_LISTEN_ACCOUNT = "twitter_listen"
TWITTER_TALKY_ACCOUNT = "twitter_talky"
SALESFORCE_ACCOUNT = "salesforce"
GITHUB_ACCOUNT = "github"

TWITTER_SALESFORCE_MAPPING = "twitter-salesforce.json"


def load_mapping(path: Optional[str] = None) -> str:
    """
    Read a mapping document as text.

    Args:
        path: File to read; defaults to the packaged twitter-salesforce mapping
    """
    if path:
        return Path(path).read_text(encoding="utf-8")
    return (
        resources.files("syndesis_qe")
        .joinpath("resources")
        .joinpath("mappings")
        .joinpath(TWITTER_SALESFORCE_MAPPING)
        .read_text(encoding="utf-8")
    )


@dataclass
class ScenarioContext:
    """Collaborator handles for one test run"""

    settings: Settings
    accounts: AccountsDirectory
    connectors: ConnectorsEndpoint
    connections: ConnectionsEndpoint
    integrations: IntegrationsEndpoint
    test_support: TestSupport
    twitter: TwitterService
    salesforce: SalesforceService
    github: GitHubService
    mapping: str
    syndesis: Optional[SyndesisClient] = None

    def close(self) -> None:
        """Close all HTTP clients owned by the context"""
        if self.syndesis is not None:
            self.syndesis.close()
        self.twitter.close()
        self.salesforce.oauth.close()
        self.salesforce.close()
        self.github.close()

    def __enter__(self) -> "ScenarioContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def build_context(settings: Settings, accounts: Optional[AccountsDirectory] = None) -> ScenarioContext:
    """
    Build a context backed by the real services.

    Accounts and the mapping are resolved before any HTTP client is opened.

    Args:
        settings: Suite settings; must pass validate_required()
        accounts: Accounts to use; loaded from settings.account_config_path if omitted

    Raises:
        ConfigurationException: If settings or accounts are incomplete
    """
    settings.validate_required()
    accounts = accounts or AccountsDirectory.load(settings.account_config_path)
    salesforce_account = accounts.require(SALESFORCE_ACCOUNT)
    twitter_account = accounts.require(TWITTER_TALKY_ACCOUNT)
    github_account = accounts.require(GITHUB_ACCOUNT)
    mapping = load_mapping(settings.mapping_path)

    logger.info(
        "Building scenario context",
        extra={"syndesis_url": settings.syndesis_url, "environment": settings.environment},
    )

    syndesis = SyndesisClient(
        settings.syndesis_api_url,
        settings.syndesis_token,
        user=settings.syndesis_user,
        timeout=settings.http_timeout,
    )
    oauth = SalesforceOAuth(salesforce_account, timeout=settings.http_timeout)

    return ScenarioContext(
        settings=settings,
        accounts=accounts,
        connectors=ConnectorsEndpoint(syndesis),
        connections=ConnectionsEndpoint(syndesis),
        integrations=IntegrationsEndpoint(syndesis),
        test_support=TestSupport(syndesis),
        twitter=TwitterService(
            twitter_account,
            api_url=settings.twitter_api_url,
            timeout=settings.http_timeout,
        ),
        salesforce=SalesforceService(
            oauth,
            api_version=settings.salesforce_api_version,
            timeout=settings.http_timeout,
        ),
        github=GitHubService(
            github_account,
            api_url=settings.github_api_url,
            timeout=settings.http_timeout,
        ),
        mapping=mapping,
        syndesis=syndesis,
    )
