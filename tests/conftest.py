"""
Shared fixtures for the credit spread tests.

Chains are built as raw feed dictionaries so the same fixtures exercise
decoding, the engine and the HTTP layer.
"""

import pytest

from credit_spreads.core.config import SpreadConstants
from credit_spreads.models.spreads import SpreadFlags


def make_leg(instrument_key, ltp=None, bid=None, ask=None, market=True):
    """Build a raw call_options / put_options block."""
    leg = {"instrument_key": instrument_key}
    if market:
        leg["market_data"] = {
            "ltp": ltp,
            "volume": 1000,
            "oi": 5000,
            "close_price": ltp,
            "bid_price": bid,
            "bid_qty": 25,
            "ask_price": ask,
            "ask_qty": 25,
            "prev_oi": 4800,
        }
        leg["option_greeks"] = {"vega": 1.2, "theta": -0.8, "gamma": 0.01, "delta": 0.3, "iv": 14.5}
    return leg


def make_entry(strike, spot=100.0, call=None, put=None):
    """Build a raw option chain entry."""
    return {
        "expiry": "2024-12-26",
        "strike_price": strike,
        "underlying_key": "NSE_INDEX|Nifty 50",
        "underlying_spot_price": spot,
        "call_options": call,
        "put_options": put,
    }


def flags(bid_ask=False, risk_reward=False, sort=False):
    return SpreadFlags(
        enforce_bid_ask_spread=bid_ask,
        enforce_risk_reward=risk_reward,
        sort_by_breakeven_distance=sort,
    )


@pytest.fixture
def no_flags():
    return flags()


@pytest.fixture
def constants():
    return SpreadConstants(lot_size=25, max_bid_ask_spread=2.0, risk_reward_ratio=3.0)


@pytest.fixture
def example_chain():
    """Spot 100 with two OTM calls, the smallest chain that yields a spread."""
    return [
        make_entry(105, call=make_leg("NSE_FO|105CE", ltp=3.0, bid=2.9, ask=3.1)),
        make_entry(110, call=make_leg("NSE_FO|110CE", ltp=1.0, bid=0.9, ask=1.1)),
    ]


@pytest.fixture
def call_chain():
    """
    Spot 100 call side.

    95 is ITM, 100 is ATM, 120 has a 3.0 wide quote, 125 has no market data.
    """
    return [
        make_entry(95, call=make_leg("NSE_FO|95CE", ltp=6.0, bid=5.9, ask=6.1)),
        make_entry(100, call=make_leg("NSE_FO|100CE", ltp=4.0, bid=3.9, ask=4.1)),
        make_entry(105, call=make_leg("NSE_FO|105CE", ltp=3.0, bid=2.9, ask=3.1)),
        make_entry(110, call=make_leg("NSE_FO|110CE", ltp=1.0, bid=0.9, ask=1.1)),
        make_entry(115, call=make_leg("NSE_FO|115CE", ltp=0.5, bid=0.25, ask=0.75)),
        make_entry(120, call=make_leg("NSE_FO|120CE", ltp=0.25, bid=0.0, ask=3.0)),
        make_entry(125, call=make_leg("NSE_FO|125CE", market=False)),
    ]


@pytest.fixture
def put_chain():
    """
    Spot 100 put side, deliberately listed out of strike order.

    105 is ITM, 100 is ATM, 85 has no bid.
    """
    return [
        make_entry(85, put=make_leg("NSE_FO|85PE", ltp=0.5, bid=None, ask=0.6)),
        make_entry(105, put=make_leg("NSE_FO|105PE", ltp=6.0, bid=5.9, ask=6.1)),
        make_entry(95, put=make_leg("NSE_FO|95PE", ltp=2.0, bid=1.9, ask=2.1)),
        make_entry(100, put=make_leg("NSE_FO|100PE", ltp=4.0, bid=3.9, ask=4.1)),
        make_entry(90, put=make_leg("NSE_FO|90PE", ltp=1.0, bid=0.75, ask=1.25)),
    ]
