"""Pydantic models for the zapper HTTP API.

Amounts travel as uint256 decimal strings with camelCase aliases.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from zapper.models.types import Address, Uint256


class SimulateRequest(BaseModel):
    """Estimate the LP a deposit would deliver."""

    caller: Address = Field(description="Account asking for the estimate (must be authorized).")
    amount: Uint256 = Field(description="Deposit in the deposit asset's native decimals.")
    recipient: Address = Field(description="LP recipient of the eventual deposit.")

    model_config = {"populate_by_name": True}


class SimulateResponse(BaseModel):
    amount: Uint256
    join_amounts: list[Uint256] = Field(alias="joinAmounts")
    estimate: Uint256 = Field(description="LP out reported by the pool query.")
    margined_estimate: Uint256 = Field(
        alias="marginedEstimate",
        description="Estimate after the simulation margin; safe as a min-out baseline.",
    )
    recommended_min_out: Uint256 = Field(
        alias="recommendedMinOut",
        description="Margined estimate less the recommended caller slippage.",
    )

    model_config = {"populate_by_name": True}


class RecordPriceRequest(BaseModel):
    caller: Address = Field(description="Keeper account.")


class ObservationModel(BaseModel):
    timestamp: int
    price: Uint256


class RecordPriceResponse(BaseModel):
    recorded: bool
    observation: ObservationModel | None = None


class ConsultResponse(BaseModel):
    amount: Uint256
    lp_out: Uint256 = Field(alias="lpOut")
    state: str

    model_config = {"populate_by_name": True}


class OracleStatusResponse(BaseModel):
    state: str
    period: int
    granularity: int
    observations: list[ObservationModel]


class ErrorResponse(BaseModel):
    """Body of every mapped ZapError response."""

    error: str
    detail: str
