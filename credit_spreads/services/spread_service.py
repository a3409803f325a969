import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union
from pydantic import TypeAdapter, ValidationError

from credit_spreads.core.config import SpreadConstants
from credit_spreads.models.spreads import CreditSpread, SpreadParams
from credit_spreads.utils.calculations import compute_bear_call_spreads, compute_bull_put_spreads
from credit_spreads.utils.chain_utils import MalformedInputError

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

STRATEGIES: Dict[str, Callable[..., List[CreditSpread]]] = {
    "bear_call": compute_bear_call_spreads,
    "bull_put": compute_bull_put_spreads,
}

_spreads_adapter = TypeAdapter(List[CreditSpread])


def parse_spread_params(payload: Union[str, bytes, Mapping[str, Any]]) -> SpreadParams:
    """
    Decode a request payload into SpreadParams.

    Args:
        payload: JSON text or an already parsed JSON object

    Returns:
        SpreadParams with a decoded option chain and all three flags

    Raises:
        MalformedInputError: If the payload is not valid JSON or does not match the expected shape
    """
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return SpreadParams.model_validate_json(payload)
        return SpreadParams.model_validate(payload)
    except ValidationError as e:
        raise MalformedInputError(f"Failed to parse spread parameters: {e}") from e


def encode_spreads(spreads: Sequence[CreditSpread]) -> str:
    """Encode spreads as a JSON array"""
    return _spreads_adapter.dump_json(list(spreads)).decode("utf-8")


def run_strategy(
    strategy: str,
    params: SpreadParams,
    constants: Optional[SpreadConstants] = None,
) -> List[CreditSpread]:
    if strategy not in STRATEGIES:
        raise ValueError(f"Strategy must be one of {sorted(STRATEGIES)}")
    return STRATEGIES[strategy](params.option_chain, params, constants)


def credit_spreads_json(
    strategy: str,
    payload: Union[str, bytes, Mapping[str, Any]],
    constants: Optional[SpreadConstants] = None,
) -> Optional[str]:
    """
    Text in, text out: decode the payload, run the strategy and encode the result.

    Args:
        strategy: 'bear_call' or 'bull_put'
        payload: SpreadParams as JSON text or parsed object
        constants: Engine constants override

    Returns:
        JSON array of spreads, or None if the payload could not be decoded
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Strategy must be one of {sorted(STRATEGIES)}")

    try:
        params = parse_spread_params(payload)
        spreads = run_strategy(strategy, params, constants)
    except MalformedInputError as e:
        logger.error(f"Malformed input for {strategy} spreads: {str(e)}")
        return None

    logger.info(f"Computed {len(spreads)} {strategy} spreads from {len(params.option_chain)} strikes")
    return encode_spreads(spreads)
