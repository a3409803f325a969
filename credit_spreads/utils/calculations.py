import numpy as np
import pandas as pd
import logging
from typing import Any, List, Optional, Sequence

from credit_spreads.core.config import DEFAULT_CONSTANTS, SpreadConstants
from credit_spreads.models.spreads import CreditSpread, SpreadFlags
from credit_spreads.utils.chain_utils import (
    chain_to_frame,
    filter_otm_strikes,
    parse_option_chain,
    validate_leg_type,
)

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def generate_strike_pairs(filtered_df: pd.DataFrame, leg_type: str) -> pd.DataFrame:
    """
    Pair every eligible strike with every strike further from the money.

    Calls are walked in ascending strike order and puts in descending order,
    so the sell leg of each pair is always the one nearer to spot. Pairs come
    out grouped by sell leg, and within a group ordered by buy leg in the
    same direction.

    Args:
        filtered_df: Frame produced by filter_otm_strikes
        leg_type: 'CE' for bear call spreads, 'PE' for bull put spreads

    Returns:
        DataFrame with 'sell_' and 'buy_' prefixed copies of the chain columns
    """
    validate_leg_type(leg_type)
    ascending = leg_type == 'CE'

    ordered_df = filtered_df.sort_values('strike_price', ascending=ascending, kind='stable')
    ordered_df = ordered_df.reset_index(drop=True)
    ordered_df['position'] = np.arange(len(ordered_df))

    pairs_df = ordered_df.add_prefix('sell_').merge(ordered_df.add_prefix('buy_'), how='cross')

    if ascending:
        further_out = pairs_df['buy_strike_price'] > pairs_df['sell_strike_price']
    else:
        further_out = pairs_df['buy_strike_price'] < pairs_df['sell_strike_price']

    pairs_df = pairs_df[further_out].sort_values(['sell_position', 'buy_position'])
    pairs_df = pairs_df.drop(columns=['sell_position', 'buy_position']).reset_index(drop=True)

    logger.debug(f"Generated {len(pairs_df)} {leg_type} pairs from {len(ordered_df)} strikes")
    return pairs_df


def score_spreads(pairs_df: pd.DataFrame, leg_type: str, lot_size: int) -> pd.DataFrame:
    """
    Compute the payoff metrics of each (sell, buy) pair.

    Profit, loss and breakeven are rounded up to whole units; the breakeven
    distance is truncated to two decimals.

    Args:
        pairs_df: Frame produced by generate_strike_pairs
        leg_type: 'CE' or 'PE'
        lot_size: Units per contract

    Returns:
        DataFrame with one row per CreditSpread field
    """
    validate_leg_type(leg_type)

    sell_strike = pairs_df['sell_strike_price']
    buy_strike = pairs_df['buy_strike_price']
    spot = pairs_df['sell_underlying_spot_price']

    # Missing LTP counts as a zero premium
    sell_ltp = pairs_df['sell_ltp'].fillna(0.0)
    buy_ltp = pairs_df['buy_ltp'].fillna(0.0)

    spread_width = (buy_strike - sell_strike).abs() * lot_size
    net_credit = (sell_ltp - buy_ltp) * lot_size

    if leg_type == 'CE':
        breakeven = np.ceil(sell_strike + net_credit / lot_size)
    else:
        breakeven = np.ceil(buy_strike - net_credit / lot_size)

    # Zero spot has no meaningful distance
    safe_spot = spot.where(spot != 0)
    distance = np.floor((breakeven - spot).abs() / safe_spot * 100 * 100) / 100

    return pd.DataFrame({
        'sell_strike': sell_strike,
        'buy_strike': buy_strike,
        'spread_width': spread_width,
        'net_credit': net_credit,
        'max_profit': np.ceil(net_credit),
        'max_loss': np.ceil(spread_width - net_credit),
        'breakeven': breakeven,
        'breakeven_distance_percent': distance.fillna(0.0),
        'leg_type': leg_type,
    })


def to_credit_spreads(scored_df: pd.DataFrame) -> List[CreditSpread]:
    return [
        CreditSpread(
            sell_strike=float(row.sell_strike),
            buy_strike=float(row.buy_strike),
            spread_width=float(row.spread_width),
            net_credit=float(row.net_credit),
            max_profit=int(row.max_profit),
            max_loss=int(row.max_loss),
            breakeven=int(row.breakeven),
            breakeven_distance_percent=float(row.breakeven_distance_percent),
            leg_type=row.leg_type,
        )
        for row in scored_df.itertuples(index=False)
    ]


def filter_and_sort_spreads(
    spreads: Sequence[CreditSpread],
    enforce_risk_reward: bool,
    sort_by_breakeven_distance: bool,
    risk_reward_ratio: float,
) -> List[CreditSpread]:
    """
    Apply the risk/reward screen and the breakeven distance ordering.

    The screen compares the rounded max_loss and max_profit. The sort is
    stable, so spreads with equal distance keep their generation order.
    """
    result = list(spreads)

    if enforce_risk_reward:
        result = [s for s in result if s.max_loss <= risk_reward_ratio * s.max_profit]

    if sort_by_breakeven_distance:
        result = sorted(result, key=lambda s: s.breakeven_distance_percent, reverse=True)

    return result


def compute_credit_spreads(
    leg_type: str,
    option_chain: Sequence[Any],
    flags: SpreadFlags,
    constants: Optional[SpreadConstants] = None,
) -> List[CreditSpread]:
    """
    Run the full spread pipeline for one side of the chain.

    Args:
        leg_type: 'CE' for bear call spreads, 'PE' for bull put spreads
        option_chain: Decoded OptionChainEntry records or raw mappings
        flags: Screens and ordering to apply
        constants: Engine constants, defaults to the configured ones

    Returns:
        List of CreditSpread, possibly empty

    Raises:
        MalformedInputError: If the chain cannot be decoded
    """
    validate_leg_type(leg_type)
    constants = constants or DEFAULT_CONSTANTS

    chain = parse_option_chain(option_chain)

    chain_df = chain_to_frame(chain, leg_type)
    filtered_df = filter_otm_strikes(
        chain_df,
        leg_type,
        flags.enforce_bid_ask_spread,
        constants.max_bid_ask_spread,
    )
    if len(filtered_df) < 2:
        return []

    pairs_df = generate_strike_pairs(filtered_df, leg_type)
    scored_df = score_spreads(pairs_df, leg_type, constants.lot_size)

    return filter_and_sort_spreads(
        to_credit_spreads(scored_df),
        flags.enforce_risk_reward,
        flags.sort_by_breakeven_distance,
        constants.risk_reward_ratio,
    )


def compute_bear_call_spreads(
    option_chain: Sequence[Any],
    flags: SpreadFlags,
    constants: Optional[SpreadConstants] = None,
) -> List[CreditSpread]:
    """Sell an OTM call, buy a higher strike call."""
    return compute_credit_spreads('CE', option_chain, flags, constants)


def compute_bull_put_spreads(
    option_chain: Sequence[Any],
    flags: SpreadFlags,
    constants: Optional[SpreadConstants] = None,
) -> List[CreditSpread]:
    """Sell an OTM put, buy a lower strike put."""
    return compute_credit_spreads('PE', option_chain, flags, constants)
