"""
Twitter to Salesforce Scenario

Verifies the integration that turns a twitter mention into a Salesforce
contact: a tweet from the talky account mentioning the listen account must
produce a contact whose description is the tweet text.

Run order:
    INIT -> CONNECTIONS_CREATED -> INTEGRATION_SUBMITTED -> INTEGRATION_ACTIVE
    -> ACTION_TRIGGERED -> EFFECT_VERIFIED -> CLEANED_UP

Cleanup may run from any state and leaves no tweets, contact, helper
repository or platform data behind. It runs before and after the scenario.
"""

import time
from enum import Enum
from typing import Callable, Optional

from syndesis_qe.context import (
    GITHUB_ACCOUNT,
    SALESFORCE_ACCOUNT,
    TWITTER_LISTEN_ACCOUNT,
    TWITTER_TALKY_ACCOUNT,
    ScenarioContext,
)
from syndesis_qe.models.salesforce_records import SalesforceContact
from syndesis_qe.models.syndesis import (
    Connection,
    Connector,
    Integration,
    IntegrationStatus,
    Step,
    StepKind,
)
from syndesis_qe.utils.exceptions import ScenarioAssertionError
from syndesis_qe.utils.helpers import find_action, property_map, sanitize_name
from syndesis_qe.utils.logging_config import get_logger
from syndesis_qe.utils.waiting import wait_for_activation, wait_for_event

logger = get_logger(__name__)

TWITTER_CONNECTION_ID = "fuseqe-twitter"
SALESFORCE_CONNECTION_ID = "fuseqe-salesforce"
INTEGRATION_NAME = "Twitter to salesforce contact rest test"
GITHUB_REPO_NAME = sanitize_name(INTEGRATION_NAME)

TWITTER_MENTION_ACTION = "twitter-mention"
SALESFORCE_UPSERT_CONTACT_ACTION = "salesforce-upsert-contact"

MESSAGE_TEMPLATE = "Have you heard about Syndesis project? It is pretty amazing... @{screen_name}"


class ScenarioState(str, Enum):
    INIT = "INIT"
    CONNECTIONS_CREATED = "CONNECTIONS_CREATED"
    INTEGRATION_SUBMITTED = "INTEGRATION_SUBMITTED"
    INTEGRATION_ACTIVE = "INTEGRATION_ACTIVE"
    ACTION_TRIGGERED = "ACTION_TRIGGERED"
    EFFECT_VERIFIED = "EFFECT_VERIFIED"
    CLEANED_UP = "CLEANED_UP"


class TwitterSalesforceScenario:
    """Twitter mention to Salesforce upsert contact scenario"""

    def __init__(
        self,
        context: ScenarioContext,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.context = context
        self.clock = clock
        self.sleep = sleep
        self.state = ScenarioState.INIT

        self.twitter_connector: Optional[Connector] = None
        self.salesforce_connector: Optional[Connector] = None
        self.integration: Optional[Integration] = None

    @property
    def talky_screen_name(self) -> str:
        return self.context.accounts.require(TWITTER_TALKY_ACCOUNT).require_property("screenName")

    @property
    def listen_screen_name(self) -> str:
        return self.context.accounts.require(TWITTER_LISTEN_ACCOUNT).require_property("screenName")

    @property
    def github_repository(self) -> str:
        login = self.context.accounts.require(GITHUB_ACCOUNT).require_property("login")
        return f"{login}/{GITHUB_REPO_NAME}"

    def _advance(self, state: ScenarioState) -> None:
        logger.debug(f"Scenario state {self.state.value} -> {state.value}")
        self.state = state

    def cleanup(self) -> None:
        """Remove everything the scenario may have left behind."""
        logger.info("Cleaning up twitter to salesforce scenario")
        self.context.test_support.reset_db()
        self.context.github.delete_repositories(self.github_repository)
        self.context.salesforce.delete_contact_by_screen_name(self.talky_screen_name)
        self.context.twitter.delete_all_tweets()
        self._advance(ScenarioState.CLEANED_UP)

    def create_connections(self) -> None:
        """Create the twitter (listen) and salesforce connections."""
        self.twitter_connector = self.context.connectors.get("twitter")
        self.salesforce_connector = self.context.connectors.get("salesforce")

        twitter_account = self.context.accounts.require(TWITTER_LISTEN_ACCOUNT)
        twitter_connection = Connection(
            id=TWITTER_CONNECTION_ID,
            name="Fuse QE twitter listen",
            connector=self.twitter_connector,
            connector_id=self.twitter_connector.id,
            configured_properties=property_map(
                "accessToken", twitter_account.require_property("accessToken"),
                "accessTokenSecret", twitter_account.require_property("accessTokenSecret"),
                "consumerKey", twitter_account.require_property("consumerKey"),
                "consumerSecret", twitter_account.require_property("consumerSecret"),
            ),
        )

        salesforce_account = self.context.accounts.require(SALESFORCE_ACCOUNT)
        salesforce_connection = Connection(
            id=SALESFORCE_CONNECTION_ID,
            name="Fuse QE salesforce",
            connector=self.salesforce_connector,
            connector_id=self.salesforce_connector.id,
            configured_properties=property_map(
                "clientId", salesforce_account.require_property("clientId"),
                "clientSecret", salesforce_account.require_property("clientSecret"),
                "instanceUrl", salesforce_account.require_property("instanceUrl"),
                "loginUrl", salesforce_account.require_property("loginUrl"),
                "userName", salesforce_account.require_property("userName"),
                "password", salesforce_account.require_property("password"),
            ),
        )

        logger.info(f"Creating twitter connection {twitter_connection.name}")
        self.context.connections.create(twitter_connection)
        logger.info(f"Creating salesforce connection {salesforce_connection.name}")
        self.context.connections.create(salesforce_connection)
        self._advance(ScenarioState.CONNECTIONS_CREATED)

    def create_integration(self) -> Integration:
        """Submit the mention -> mapper -> upsert contact integration."""
        twitter_connection = self.context.connections.get(TWITTER_CONNECTION_ID)
        salesforce_connection = self.context.connections.get(SALESFORCE_CONNECTION_ID)

        steps = [
            Step(
                step_kind=StepKind.ENDPOINT,
                connection=twitter_connection,
                action=find_action(self.twitter_connector, TWITTER_MENTION_ACTION),
            ),
            Step(
                step_kind=StepKind.MAPPER,
                configured_properties=property_map("atlasmapping", self.context.mapping),
            ),
            Step(
                step_kind=StepKind.ENDPOINT,
                connection=salesforce_connection,
                action=find_action(self.salesforce_connector, SALESFORCE_UPSERT_CONTACT_ACTION),
            ),
        ]
        integration = Integration(
            name=INTEGRATION_NAME,
            steps=steps,
            desired_status=IntegrationStatus.ACTIVATED,
        )

        logger.info(f"Creating integration {integration.name}")
        self.integration = self.context.integrations.create(integration)
        self._advance(ScenarioState.INTEGRATION_SUBMITTED)
        return self.integration

    def wait_for_integration(self) -> None:
        """Block until the integration is activated or fail the run."""
        settings = self.context.settings
        start = self.clock()

        logger.info("Waiting until integration becomes active. This may take a while...")
        activated = wait_for_activation(
            self.context.integrations,
            self.integration,
            settings.activation_timeout,
            settings.activation_poll_interval,
            clock=self.clock,
            sleep=self.sleep,
        )
        elapsed = int(self.clock() - start)

        if not activated:
            logger.error(
                f"Integration was not activated within {settings.activation_timeout}s",
                extra={"integration_id": self.integration.id, "elapsed": elapsed},
            )
            raise ScenarioAssertionError(
                f"Integration {self.integration.name} was not activated",
                details={"activated": False, "elapsed": elapsed},
            )

        logger.info(f"Integration pod has been started. It took {elapsed}s to build the integration.")
        self._advance(ScenarioState.INTEGRATION_ACTIVE)

    def get_contact(self) -> Optional[SalesforceContact]:
        return self.context.salesforce.get_contact_by_screen_name(self.talky_screen_name)

    def trigger_action(self) -> str:
        """
        Tweet a mention of the listen account from the talky account.

        Returns:
            The tweeted message
        """
        if self.get_contact() is not None:
            raise ScenarioAssertionError(
                f"Contact for @{self.talky_screen_name} exists before the tweet was sent"
            )

        message = MESSAGE_TEMPLATE.format(screen_name=self.listen_screen_name)
        logger.info(f"Sending a tweet from {self.talky_screen_name}. Message: {message}")
        self.context.twitter.update_status(message)
        self._advance(ScenarioState.ACTION_TRIGGERED)
        return message

    def verify_effect(self, message: str) -> SalesforceContact:
        """
        Wait for the contact and check it was filled from the tweet.

        Args:
            message: Text of the tweet sent by trigger_action()

        Returns:
            The created contact
        """
        settings = self.context.settings
        start = self.clock()

        logger.info("Waiting until a contact appears in salesforce...")
        contact_created = wait_for_event(
            lambda contact: contact is not None,
            self.get_contact,
            settings.contact_timeout,
            settings.contact_poll_interval,
            clock=self.clock,
            sleep=self.sleep,
        )
        elapsed = int(self.clock() - start)

        if not contact_created:
            logger.error(
                f"Contact did not appear in salesforce within {settings.contact_timeout}s",
                extra={"elapsed": elapsed},
            )
            raise ScenarioAssertionError(
                "Contact has not appeared in salesforce",
                details={"elapsed": elapsed},
            )
        logger.info(f"Contact appeared in salesforce. It took {elapsed}s to create contact.")

        contact = self.get_contact()
        if contact is None:
            raise ScenarioAssertionError("Contact disappeared from salesforce")
        if contact.Description != message:
            raise ScenarioAssertionError(
                "Contact description does not match the tweet",
                details={"expected": message, "actual": contact.Description},
            )
        if not contact.FirstName:
            raise ScenarioAssertionError("Contact first name is empty")
        if not contact.LastName:
            raise ScenarioAssertionError("Contact last name is empty")

        self._advance(ScenarioState.EFFECT_VERIFIED)
        return contact

    def run(self) -> SalesforceContact:
        """Run the whole scenario between two cleanups."""
        self.cleanup()
        try:
            self.create_connections()
            self.create_integration()
            self.wait_for_integration()
            message = self.trigger_action()
            contact = self.verify_effect(message)
        except BaseException:
            # The scenario failure stays the reported cause
            try:
                self.cleanup()
            except Exception as e:
                logger.error(f"Cleanup after a failed run also failed: {e}", exc_info=True)
            raise

        self.cleanup()
        logger.info("Twitter to salesforce integration test finished.")
        return contact
