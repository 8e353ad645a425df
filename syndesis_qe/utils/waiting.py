"""
Waiting Utilities

Polls a supplier until a predicate holds or a timeout elapses. Used to wait for
asynchronous effects on the platform and on third-party services.
"""

import time
from typing import TYPE_CHECKING, Callable, TypeVar

from syndesis_qe.models.syndesis import Integration, IntegrationStatus
from syndesis_qe.utils.logging_config import get_logger

if TYPE_CHECKING:
    from syndesis_qe.services.syndesis_service import IntegrationsEndpoint

logger = get_logger(__name__)

T = TypeVar("T")


def wait_for_event(
    predicate: Callable[[T], bool],
    supplier: Callable[[], T],
    timeout: float,
    interval: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Wait until a predicate is true or the timeout elapses.

    The predicate is evaluated on a freshly supplied value each round. The
    evaluation that lands on or past the deadline is the last one and its
    result is returned.

    Args:
        predicate: Test applied to each supplied value
        supplier: Produces the value to test; called once per round
        timeout: How long to wait, in seconds
        interval: Sleep between rounds, in seconds
        clock: Monotonic time source
        sleep: Sleep function

    Returns:
        True if the predicate became true within the timeout, otherwise False

    Raises:
        ValueError: If timeout or interval is negative
    """
    if timeout < 0 or interval < 0:
        raise ValueError("timeout and interval must be non-negative")

    start = clock()
    attempts = 0
    while True:
        attempts += 1
        if predicate(supplier()):
            logger.debug(
                f"Condition met after {attempts} attempt(s)",
                extra={"attempts": attempts, "elapsed": clock() - start},
            )
            return True

        elapsed = clock() - start
        if elapsed >= timeout:
            logger.debug(
                f"Condition not met within {timeout}s",
                extra={"attempts": attempts, "elapsed": elapsed},
            )
            return False

        try:
            sleep(interval)
        except InterruptedError as e:
            logger.debug(f"Interrupted while sleeping: {e}")


def wait_for_activation(
    endpoint: "IntegrationsEndpoint",
    integration: Integration,
    timeout: float,
    interval: float = 10,
    **kwargs,
) -> bool:
    """
    Wait until an integration reports the Activated status.

    Args:
        endpoint: Integrations endpoint used to read the current state
        integration: Integration to watch; must carry the id assigned on create
        timeout: How long to wait, in seconds
        interval: Seconds between status reads

    Returns:
        True if the integration was activated within the timeout
    """
    if not integration.id:
        raise ValueError("Integration has no id; was it created?")

    return wait_for_event(
        lambda i: (i.current_status or IntegrationStatus.PENDING) == IntegrationStatus.ACTIVATED,
        lambda: endpoint.get(integration.id),
        timeout,
        interval,
        **kwargs,
    )
