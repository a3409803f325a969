from fastapi import APIRouter, Body, HTTPException, status
from typing import Any, Dict, List
import logging
from datetime import datetime

from credit_spreads.core.config import settings
from credit_spreads.models.spreads import CreditSpread
from credit_spreads.services.spread_service import STRATEGIES, parse_spread_params, run_strategy
from credit_spreads.utils.chain_utils import MalformedInputError, SpreadEngineError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()


class InvalidParameterError(SpreadEngineError):
    """Raised when input parameters are invalid"""
    pass


def validate_strategy(strategy: str) -> None:
    """Validate the requested strategy name"""
    if strategy not in STRATEGIES:
        raise InvalidParameterError(f"Strategy must be one of {sorted(STRATEGIES)}")


def handle_spread_request(strategy: str, payload: Dict[str, Any]) -> List[CreditSpread]:
    request_id = datetime.now().strftime("%Y%m%d%H%M%S%f")
    logger.info(f"Request {request_id} - Processing {strategy} spread request")

    try:
        validate_strategy(strategy)

        params = parse_spread_params(payload)
        spreads = run_strategy(strategy, params)

        logger.info(
            f"Request {request_id} - Returning {len(spreads)} spreads "
            f"from {len(params.option_chain)} strikes"
        )
        return spreads

    except InvalidParameterError as e:
        logger.error(f"Request {request_id} - Invalid parameters: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    except MalformedInputError as e:
        logger.error(f"Request {request_id} - Malformed input: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(e)
        )

    except Exception as e:
        logger.error(f"Request {request_id} - Unexpected error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while processing your request"
        )


@router.post("/credit-spreads/bear-call",
    response_model=List[CreditSpread],
    responses={
        200: {"description": "Bear call spreads built from the supplied chain"},
        422: {"description": "Malformed option chain or flags"},
        500: {"description": "Internal server error"}
    })
def bear_call_spreads(payload: Dict[str, Any] = Body(...)):
    """
    Build bear call spreads: sell an OTM call, buy a higher strike call.

    The body carries the option chain and the three flags
    enforce_bid_ask_spread, enforce_risk_reward and sort_by_breakeven_distance.
    """
    return handle_spread_request("bear_call", payload)


@router.post("/credit-spreads/bull-put",
    response_model=List[CreditSpread],
    responses={
        200: {"description": "Bull put spreads built from the supplied chain"},
        422: {"description": "Malformed option chain or flags"},
        500: {"description": "Internal server error"}
    })
def bull_put_spreads(payload: Dict[str, Any] = Body(...)):
    """Build bull put spreads: sell an OTM put, buy a lower strike put."""
    return handle_spread_request("bull_put", payload)


@router.get("/health")
def health():
    return {"status": "ok", "environment": settings.environment}
