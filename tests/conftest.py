"""
Pytest Configuration and Fixtures

Provides common fixtures and test utilities for suite tests.
"""

from typing import Callable, Dict, List

import httpx
import pytest

from syndesis_qe.config import Settings
from syndesis_qe.models.accounts import Account, AccountsDirectory


class FakeClock:
    """Clock whose time only moves when sleep() is called"""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


@pytest.fixture
def fake_clock():
    """Deterministic clock/sleep pair"""
    return FakeClock()


@pytest.fixture
def account_data() -> Dict[str, Dict]:
    """Raw accounts file content"""
    return {
        "twitter_listen": {
            "service": "twitter",
            "properties": {
                "screenName": "syndesis_listen",
                "consumerKey": "listen_consumer_key",
                "consumerSecret": "listen_consumer_secret",
                "accessToken": "listen_access_token",
                "accessTokenSecret": "listen_access_token_secret",
            },
        },
        "twitter_talky": {
            "service": "twitter",
            "properties": {
                "screenName": "syndesis_talky",
                "consumerKey": "talky_consumer_key",
                "consumerSecret": "talky_consumer_secret",
                "accessToken": "talky_access_token",
                "accessTokenSecret": "talky_access_token_secret",
            },
        },
        "salesforce": {
            "service": "salesforce",
            "properties": {
                "clientId": "sf_client_id",
                "clientSecret": "sf_client_secret",
                "instanceUrl": "https://eu1.salesforce.test",
                "loginUrl": "https://login.salesforce.test",
                "userName": "qe@example.com",
                "password": "sf_password",
            },
        },
        "github": {
            "service": "github",
            "properties": {"login": "syndesis-qe", "token": "gh_token"},
        },
    }


@pytest.fixture
def accounts(account_data) -> AccountsDirectory:
    """Accounts directory with every account the scenarios use"""
    return AccountsDirectory(
        {name: Account.model_validate(data) for name, data in account_data.items()}
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests; never read from the developer's environment"""
    return Settings(
        _env_file=None,
        environment="test",
        log_level="DEBUG",
        syndesis_url="https://syndesis.test",
        syndesis_token="openshift_token",
        syndesis_user="pista",
    )
