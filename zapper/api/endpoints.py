"""API endpoints for the zapper.

Only read-only and keeper operations are exposed: the estimate an
off-chain caller needs before depositing, and the LP price oracle.
"""

import structlog
from fastapi import APIRouter, Depends, Query

from zapper.constants import RECOMMENDED_CALLER_SLIPPAGE
from zapper.local import get_default_zapper
from zapper.models.api import (
    ConsultResponse,
    ObservationModel,
    OracleStatusResponse,
    RecordPriceRequest,
    RecordPriceResponse,
    SimulateRequest,
    SimulateResponse,
)
from zapper.zap.simulator import apply_margin
from zapper.zapper import Zapper

logger = structlog.get_logger()

router = APIRouter()


def get_zapper() -> Zapper:
    """Dependency provider for the zapper instance.

    Override this in tests to inject a different zapper:
        app.dependency_overrides[get_zapper] = lambda: zapper
    """
    return get_default_zapper()


@router.post("/simulate")
def simulate(request: SimulateRequest, zapper: Zapper = Depends(get_zapper)) -> SimulateResponse:
    """Estimate LP out for a deposit.

    Error Handling:
        - Invalid request schema: 422 (Pydantic)
        - ZapError: mapped by the app's exception handler
    """
    result = zapper.simulate(request.caller, int(request.amount), request.recipient)

    logger.info(
        "simulate_served",
        caller=request.caller,
        amount=result.amount,
        margined_estimate=result.margined_estimate,
    )

    return SimulateResponse(
        amount=str(result.amount),
        joinAmounts=[str(a) for a in result.join_amounts],
        estimate=str(result.estimate),
        marginedEstimate=str(result.margined_estimate),
        recommendedMinOut=str(
            apply_margin(result.margined_estimate, RECOMMENDED_CALLER_SLIPPAGE)
        ),
    )


@router.post("/oracle/observations")
def record_price(
    request: RecordPriceRequest, zapper: Zapper = Depends(get_zapper)
) -> RecordPriceResponse:
    """Keeper poke: sample the simulator into the oracle if spacing allows.

    The body `caller` is taken as given and checked against the keeper
    allow-list only. Authenticating that the request really comes from
    that account is left to the layer in front of this service.
    """
    observation = zapper.record_price(request.caller)
    if observation is None:
        return RecordPriceResponse(recorded=False)
    return RecordPriceResponse(
        recorded=True,
        observation=ObservationModel(
            timestamp=observation.timestamp, price=str(observation.price)
        ),
    )


@router.get("/oracle/consult")
def consult(
    amount: int = Query(gt=0, description="Deposit in native decimals"),
    zapper: Zapper = Depends(get_zapper),
) -> ConsultResponse:
    """LP out for `amount` at the oracle's TWAP."""
    lp_out = zapper.consult(amount)
    return ConsultResponse(
        amount=str(amount),
        lpOut=str(lp_out),
        state=zapper.oracle.state.value,
    )


@router.get("/oracle")
def oracle_status(zapper: Zapper = Depends(get_zapper)) -> OracleStatusResponse:
    """Oracle state and the current observation window."""
    oracle = zapper.oracle
    return OracleStatusResponse(
        state=oracle.state.value,
        period=oracle.period,
        granularity=oracle.granularity,
        observations=[
            ObservationModel(timestamp=o.timestamp, price=str(o.price))
            for o in oracle.observations()
        ],
    )
