import pandas as pd
import logging
from typing import Any, List, Sequence, Union
from pydantic import TypeAdapter, ValidationError

from credit_spreads.models.option_chain import OptionChainEntry

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

CHAIN_COLUMNS = [
    'strike_price',
    'underlying_spot_price',
    'ltp',
    'bid_price',
    'ask_price',
]

_chain_adapter = TypeAdapter(List[OptionChainEntry])


class SpreadEngineError(Exception):
    """Base exception for spread engine related errors"""
    pass


class MalformedInputError(SpreadEngineError):
    """Raised when the option chain snapshot cannot be decoded"""
    pass


def validate_leg_type(leg_type: str) -> None:
    if leg_type not in ['CE', 'PE']:
        raise ValueError("Leg type must be either 'CE' or 'PE'")


def parse_option_chain(raw: Union[str, bytes, Sequence[Any]]) -> List[OptionChainEntry]:
    """
    Decode an option chain snapshot into OptionChainEntry records.

    Args:
        raw: JSON text, or a sequence of mappings / already decoded entries

    Returns:
        List of OptionChainEntry in input order

    Raises:
        MalformedInputError: If any entry is missing required fields or has wrong types
    """
    try:
        if isinstance(raw, (str, bytes, bytearray)):
            return _chain_adapter.validate_json(raw)
        return _chain_adapter.validate_python(list(raw))
    except ValidationError as e:
        raise MalformedInputError(f"Failed to parse option chain: {e}") from e
    except TypeError as e:
        raise MalformedInputError(f"Option chain must be a list of entries: {e}") from e


def chain_to_frame(chain: Sequence[OptionChainEntry], leg_type: str) -> pd.DataFrame:
    """
    Flatten one side of the chain into a DataFrame, one row per entry.

    Absent legs, snapshots and prices become NaN; nothing is dropped here.
    """
    validate_leg_type(leg_type)

    rows = []
    for entry in chain:
        leg = entry.leg(leg_type)
        market = leg.market if leg is not None else None
        rows.append({
            'strike_price': entry.strike_price,
            'underlying_spot_price': entry.underlying_spot_price,
            'ltp': market.last_traded_price if market is not None else None,
            'bid_price': market.bid_price if market is not None else None,
            'ask_price': market.ask_price if market is not None else None,
        })

    frame = pd.DataFrame(rows, columns=CHAIN_COLUMNS)
    return frame.astype(float)


def filter_otm_strikes(
    chain_df: pd.DataFrame,
    leg_type: str,
    enforce_bid_ask_spread: bool,
    max_bid_ask_spread: float,
) -> pd.DataFrame:
    """
    Keep out-of-the-money strikes with a usable quote.

    Args:
        chain_df: Frame produced by chain_to_frame
        leg_type: 'CE' keeps strikes above spot, 'PE' keeps strikes below spot
        enforce_bid_ask_spread: Also require bid and ask with |ask - bid| <= max_bid_ask_spread
        max_bid_ask_spread: Absolute liquidity threshold

    Returns:
        Filtered frame in input order
    """
    validate_leg_type(leg_type)

    if leg_type == 'CE':
        is_otm = chain_df['strike_price'] > chain_df['underlying_spot_price']
    else:
        is_otm = chain_df['strike_price'] < chain_df['underlying_spot_price']

    # A missing leg or snapshot leaves ltp as NaN as well
    mask = is_otm & chain_df['ltp'].notna()

    if enforce_bid_ask_spread:
        has_quotes = chain_df['bid_price'].notna() & chain_df['ask_price'].notna()
        bid_ask_width = (chain_df['ask_price'] - chain_df['bid_price']).abs()
        mask &= has_quotes & (bid_ask_width <= max_bid_ask_spread)

    filtered_df = chain_df[mask].reset_index(drop=True)
    logger.debug(f"Kept {len(filtered_df)} of {len(chain_df)} {leg_type} strikes")
    return filtered_df
