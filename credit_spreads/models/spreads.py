# credit_spreads/models/spreads.py
from pydantic import BaseModel, ConfigDict, StrictBool
from typing import List, Literal

from credit_spreads.models.option_chain import OptionChainEntry

LegType = Literal["CE", "PE"]


class SpreadFlags(BaseModel):
    """Caller-selected screens and ordering. Every flag must be given explicitly."""
    model_config = ConfigDict(frozen=True)

    enforce_bid_ask_spread: StrictBool
    enforce_risk_reward: StrictBool
    sort_by_breakeven_distance: StrictBool


class SpreadParams(SpreadFlags):
    option_chain: List[OptionChainEntry]


class CreditSpread(BaseModel):
    model_config = ConfigDict(frozen=True)

    sell_strike: float
    buy_strike: float
    spread_width: float
    net_credit: float
    max_profit: int
    max_loss: int
    breakeven: int
    breakeven_distance_percent: float
    leg_type: LegType
