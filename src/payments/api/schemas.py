"""Pydantic request/response schemas for the Payments API."""

from pydantic import BaseModel, Field


class ConfigureGatewayRequest(BaseModel):
    behaviour: str = Field(default="succeed", pattern="^(succeed|dismiss|fail|manual)$")
    available: bool = True
    failure_reason: str = "Card declined"


class GatewayConfigResponse(BaseModel):
    gateway: str
    behaviour: str | None = None
    available: bool
    failure_reason: str | None = None


class WidgetOptionsResponse(BaseModel):
    key: str | None = None
    amount: int
    currency: str
    merchant_name: str
    description: str
    reference: str
    prefill: dict
    notes: dict
