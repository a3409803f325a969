# credit_spreads/models/option_chain.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Optional

Price = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class ChainModel(BaseModel):
    """Immutable record decoded from the option chain feed"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class MarketSnapshot(ChainModel):
    last_traded_price: Optional[Price] = Field(None, alias="ltp")
    volume: Optional[int] = None
    open_interest: Optional[int] = Field(None, alias="oi")
    close_price: Optional[Price] = None
    bid_price: Optional[Price] = None
    bid_qty: Optional[int] = None
    ask_price: Optional[Price] = None
    ask_qty: Optional[int] = None
    previous_open_interest: Optional[int] = Field(None, alias="prev_oi")


class GreeksSnapshot(ChainModel):
    vega: Optional[float] = None
    theta: Optional[float] = None
    gamma: Optional[float] = None
    delta: Optional[float] = None
    iv: Optional[float] = None


class LegData(ChainModel):
    instrument_key: str
    market: Optional[MarketSnapshot] = Field(None, alias="market_data")
    greeks: Optional[GreeksSnapshot] = Field(None, alias="option_greeks")

    @property
    def last_traded_price(self) -> Optional[float]:
        if self.market is None:
            return None
        return self.market.last_traded_price


class OptionChainEntry(ChainModel):
    """
    One strike of one expiry of one underlying.

    Either leg may be absent; a leg without market data never becomes
    part of a spread.
    """
    expiry: str
    strike_price: Annotated[float, Field(ge=0, allow_inf_nan=False)]
    underlying_key: str
    underlying_spot_price: Annotated[float, Field(ge=0, allow_inf_nan=False)]
    call_leg: Optional[LegData] = Field(None, alias="call_options")
    put_leg: Optional[LegData] = Field(None, alias="put_options")

    def leg(self, leg_type: str) -> Optional[LegData]:
        """Return the call leg for 'CE' and the put leg for 'PE'"""
        if leg_type == "CE":
            return self.call_leg
        if leg_type == "PE":
            return self.put_leg
        raise ValueError("Leg type must be either 'CE' or 'PE'")
