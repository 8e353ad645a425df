"""End-to-end scenarios run against a live platform"""

from syndesis_qe.scenarios.twitter_salesforce import ScenarioState, TwitterSalesforceScenario

__all__ = [
    "ScenarioState",
    "TwitterSalesforceScenario",
]
