"""
Shared fixtures for integration tests.

SimulatedWorld stands in for Syndesis, Twitter, Salesforce and GitHub at the
HTTP level, so the real service clients run unchanged against it. The
simulated integration activates after a few status reads and turns a mention
of the listen account into a Salesforce contact a few queries later.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest

from syndesis_qe.auth.salesforce_oauth import SalesforceOAuth
from syndesis_qe.config import get_settings
from syndesis_qe.context import ScenarioContext, build_context, load_mapping
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
from syndesis_qe.utils.logging_config import clear_run_id, set_run_id, setup_logging

SALESFORCE_INSTANCE = "https://eu1.salesforce.test"
SCREEN_NAME_FILTER = re.compile(r"TwitterScreenName__c = '(.*)'")


def json_response(status: int, data: Any = None) -> httpx.Response:
    if data is None:
        return httpx.Response(status)
    return httpx.Response(status, json=data)


class SimulatedWorld:
    """In-memory state of every service the scenario touches"""

    def __init__(
        self,
        listen_screen_name: str,
        talky_screen_name: str,
        activate_after: int = 2,
        contact_after: int = 2,
    ):
        self.listen_screen_name = listen_screen_name
        self.talky_screen_name = talky_screen_name
        self.activate_after = activate_after
        self.contact_after = contact_after

        self.connectors = {
            "twitter": {
                "id": "twitter",
                "name": "Twitter",
                "actions": [
                    {"id": "twitter-mention", "camelConnectorPrefix": "twitter-mention"},
                    {"id": "twitter-search", "camelConnectorPrefix": "twitter-search"},
                ],
            },
            "salesforce": {
                "id": "salesforce",
                "name": "Salesforce",
                "actions": [
                    {"id": "upsert-contact", "camelConnectorPrefix": "salesforce-upsert-contact"},
                ],
            },
        }
        self.connections: Dict[str, Dict] = {}
        self.integrations: Dict[str, Dict] = {}
        self.status_reads = 0
        self.db_resets = 0

        self.tweets: List[Dict[str, str]] = []
        self.next_tweet_id = 1000
        self.contacts: Dict[str, Dict] = {}
        self.pending_contact: Optional[Dict] = None
        self.queries_since_tweet = 0

        self.repositories = set()
        self.deletions: List[str] = []

    # Syndesis

    def syndesis(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.replace("/api/v1", "", 1)
        parts = path.strip("/").split("/")

        if path == "/test-support/reset-db":
            self.db_resets += 1
            self.connections.clear()
            self.integrations.clear()
            return json_response(204)

        if parts[0] == "connectors" and request.method == "GET":
            return json_response(200, self.connectors[parts[1]])

        if parts[0] == "connections":
            if request.method == "POST":
                body = json.loads(request.content)
                self.connections[body["id"]] = body
                return json_response(200, body)
            if parts[1] not in self.connections:
                return json_response(404, {"message": "not found"})
            return json_response(200, self.connections[parts[1]])

        if parts[0] == "integrations":
            if request.method == "POST":
                body = json.loads(request.content)
                body["id"] = f"i-{len(self.integrations) + 1}"
                body["currentStatus"] = "Pending"
                self.integrations[body["id"]] = body
                return json_response(200, body)
            integration = self.integrations[parts[1]]
            self.status_reads += 1
            if self.status_reads >= self.activate_after:
                integration["currentStatus"] = integration["desiredStatus"]
            return json_response(200, integration)

        return json_response(404)

    def _integration_active(self) -> bool:
        return any(i.get("currentStatus") == "Activated" for i in self.integrations.values())

    # Twitter (acting as the talky account)

    def twitter(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path == "/2/users/me":
            return json_response(
                200, {"data": {"id": "42", "name": "Talky Syndesis", "username": self.talky_screen_name}}
            )

        if path == "/2/tweets" and request.method == "POST":
            text = json.loads(request.content)["text"]
            tweet = {"id": str(self.next_tweet_id), "text": text}
            self.next_tweet_id += 1
            self.tweets.append(tweet)
            if self._integration_active() and f"@{self.listen_screen_name}" in text:
                self.pending_contact = {
                    "Id": f"003xx{tweet['id']}",
                    "FirstName": "Talky",
                    "LastName": "Syndesis",
                    "Description": text,
                    "TwitterScreenName__c": self.talky_screen_name,
                }
                self.queries_since_tweet = 0
            return json_response(201, {"data": tweet})

        if path == "/2/users/42/tweets":
            if not self.tweets:
                return json_response(200, {"meta": {"result_count": 0}})
            return json_response(200, {"data": list(reversed(self.tweets))})

        if path.startswith("/2/tweets/") and request.method == "DELETE":
            tweet_id = path.rsplit("/", 1)[1]
            self.tweets = [t for t in self.tweets if t["id"] != tweet_id]
            self.deletions.append(f"tweet:{tweet_id}")
            return json_response(200, {"data": {"deleted": True}})

        return json_response(404)

    # Salesforce

    def salesforce(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path == "/services/oauth2/token":
            return json_response(
                200, {"access_token": "sf_token", "instance_url": SALESFORCE_INSTANCE}
            )

        if path.endswith("/query"):
            if self.pending_contact is not None:
                self.queries_since_tweet += 1
                if self.queries_since_tweet > self.contact_after:
                    self.contacts[self.pending_contact["Id"]] = self.pending_contact
                    self.pending_contact = None
            screen_name = SCREEN_NAME_FILTER.search(request.url.params["q"]).group(1)
            records = [
                {"attributes": {"type": "Contact"}, **c}
                for c in self.contacts.values()
                if c["TwitterScreenName__c"] == screen_name
            ]
            return json_response(200, {"totalSize": len(records), "done": True, "records": records})

        if "/sobjects/Contact/" in path and request.method == "DELETE":
            record_id = path.rsplit("/", 1)[1]
            if self.contacts.pop(record_id, None) is None:
                return json_response(404, [{"errorCode": "ENTITY_IS_DELETED"}])
            self.deletions.append(f"contact:{record_id}")
            return json_response(204)

        return json_response(404)

    # GitHub

    def github(self, request: httpx.Request) -> httpx.Response:
        full_name = request.url.path.replace("/repos/", "", 1)
        if request.method == "DELETE" and full_name in self.repositories:
            self.repositories.remove(full_name)
            self.deletions.append(f"repo:{full_name}")
            return json_response(204)
        return json_response(404, {"message": "Not Found"})


@pytest.fixture
def world(accounts):
    return SimulatedWorld(
        listen_screen_name=accounts.require("twitter_listen").get_property("screenName"),
        talky_screen_name=accounts.require("twitter_talky").get_property("screenName"),
    )


@pytest.fixture
def simulated_context(test_settings, accounts, world):
    """Context whose clients talk to the simulated world"""
    syndesis = SyndesisClient(
        test_settings.syndesis_api_url,
        test_settings.syndesis_token,
        transport=httpx.MockTransport(world.syndesis),
    )
    salesforce_http = httpx.Client(transport=httpx.MockTransport(world.salesforce))
    oauth = SalesforceOAuth(accounts.require("salesforce"), http_client=salesforce_http)

    context = ScenarioContext(
        settings=test_settings,
        accounts=accounts,
        connectors=ConnectorsEndpoint(syndesis),
        connections=ConnectionsEndpoint(syndesis),
        integrations=IntegrationsEndpoint(syndesis),
        test_support=TestSupport(syndesis),
        twitter=TwitterService(
            accounts.require("twitter_talky"),
            http_client=httpx.Client(
                base_url="https://api.twitter.test",
                transport=httpx.MockTransport(world.twitter),
            ),
        ),
        salesforce=SalesforceService(oauth, http_client=salesforce_http),
        github=GitHubService(
            accounts.require("github"),
            http_client=httpx.Client(
                base_url="https://api.github.test",
                transport=httpx.MockTransport(world.github),
            ),
        ),
        mapping=load_mapping(),
        syndesis=syndesis,
    )
    with context:
        yield context


@pytest.fixture
def live_context():
    """Context backed by the real services; skips when not configured"""
    settings = get_settings()
    if not settings.syndesis_url or not settings.syndesis_token:
        pytest.skip("SYNDESIS_URL and SYNDESIS_TOKEN are not set")
    if not Path(settings.account_config_path).is_file():
        pytest.skip(f"Accounts file {settings.account_config_path} not found")

    setup_logging(settings.log_level)
    set_run_id()
    try:
        with build_context(settings) as context:
            yield context
    finally:
        clear_run_id()
