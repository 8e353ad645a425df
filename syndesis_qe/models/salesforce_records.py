"""
Salesforce Record Models

Pydantic models for Salesforce records read by the suite.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

CONTACT_FIELDS = ("Id", "FirstName", "LastName", "Description", "TwitterScreenName__c")


class SalesforceContact(BaseModel):
    """Salesforce Contact created by the twitter mention integration"""

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "Id": "0031700000IZ3STABC",
                "FirstName": "Talky",
                "LastName": "Syndesis",
                "Description": "Have you heard about Syndesis project?",
                "TwitterScreenName__c": "syndesis_talky",
            }
        },
    )

    Id: str = Field(description="Salesforce record ID")
    FirstName: Optional[str] = None
    LastName: Optional[str] = None
    Description: Optional[str] = None
    TwitterScreenName__c: Optional[str] = Field(
        None, description="Twitter screen name the contact was created from"
    )
