"""
Syndesis Models

Pydantic models for the management REST API payloads.

Field names follow the API's camelCase wire format through an alias generator.
Unknown fields are kept so that an object read from the API can be sent back
unchanged, e.g. a connector embedded in a new connection.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SyndesisModel(BaseModel):
    """Base for API payloads"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_api(self) -> Dict[str, Any]:
        """Serialize to the API's JSON shape"""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class IntegrationStatus(str, Enum):
    """Integration lifecycle states"""

    DRAFT = "Draft"
    PENDING = "Pending"
    ACTIVATED = "Activated"
    DEACTIVATED = "Deactivated"
    DELETED = "Deleted"


class StepKind(str, Enum):
    ENDPOINT = "endpoint"
    MAPPER = "mapper"


class Action(SyndesisModel):
    """Operation exposed by a connector"""

    id: Optional[str] = None
    name: Optional[str] = None
    camel_connector_prefix: Optional[str] = Field(
        None, description="Prefix identifying the camel connector, e.g. twitter-mention"
    )


class Connector(SyndesisModel):
    """Endpoint type, e.g. twitter or salesforce"""

    id: str
    name: Optional[str] = None
    actions: List[Action] = Field(default_factory=list)


class Connection(SyndesisModel):
    """Configured, credentialed instance of a connector"""

    id: Optional[str] = None
    name: str
    connector_id: Optional[str] = None
    connector: Optional[Connector] = None
    configured_properties: Dict[str, str] = Field(default_factory=dict)


class Step(SyndesisModel):
    """One stage of an integration"""

    id: Optional[str] = None
    step_kind: StepKind
    connection: Optional[Connection] = None
    action: Optional[Action] = None
    configured_properties: Dict[str, str] = Field(default_factory=dict)


class Integration(SyndesisModel):
    """Pipeline of steps plus its desired and reported status"""

    id: Optional[str] = None
    name: str
    steps: List[Step] = Field(default_factory=list)
    desired_status: Optional[IntegrationStatus] = None
    current_status: Optional[IntegrationStatus] = None
