"""
Asset Gateway request and response models.

Request bodies are deliberately permissive: every field is optional here
and nothing is checked before submission, so whatever the ledger rejects
is what the client sees.
"""

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Numeric fields take JSON numbers or numeric strings
Numeric = Union[int, float, Decimal, str]

# Text fields also take JSON numbers (msisdn, mpin) and are sent as strings
Text = Union[str, int, float]


# Request Models (API Input)


class AssetCreateRequest(BaseModel):
    """Request to create an asset."""

    model_config = ConfigDict(populate_by_name=True)

    asset_id: Optional[Text] = Field(None, alias="assetID")
    dealer_id: Optional[Text] = Field(None, alias="dealerID")
    msisdn: Optional[Text] = None
    mpin: Optional[Text] = None
    balance: Optional[Numeric] = None
    status: Optional[Text] = None
    trans_amount: Optional[Numeric] = Field(None, alias="transAmount")
    trans_type: Optional[Text] = Field(None, alias="transType")
    remarks: Optional[Text] = None


class AssetUpdateRequest(BaseModel):
    """Request to update an asset's balance and transaction details."""

    model_config = ConfigDict(populate_by_name=True)

    balance: Optional[Numeric] = None
    status: Optional[Text] = None
    trans_type: Optional[Text] = Field(None, alias="transType")
    remarks: Optional[Text] = None
    trans_amount: Optional[Numeric] = Field(None, alias="transAmount")


# Response Models (API Output)


class AssetChangeResponse(BaseModel):
    """Confirmation of a submitted asset transaction."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    asset_id: str = Field(..., alias="assetID")


class ErrorResponse(BaseModel):
    """Error body returned with 500 responses."""

    error: str


class HealthResponse(BaseModel):
    """Service health, including the ledger session state."""

    status: str = "healthy"
    session: str
    channel: Optional[Text] = None
    chaincode: Optional[Text] = None
    identity: Optional[Text] = None
    version: str
