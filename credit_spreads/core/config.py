from dataclasses import dataclass
import logging

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    environment: str = "development"
    LOG_LEVEL: str = "INFO"

    # Engine constants
    LOT_SIZE: int = 25
    MAX_BID_ASK_SPREAD: float = 2.0
    RISK_REWARD_RATIO: float = 3.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@dataclass(frozen=True)
class SpreadConstants:
    """
    Fixed scalars applied by the spread engine.

    Attributes:
        lot_size: Units of the underlying per contract
        max_bid_ask_spread: Widest absolute ask - bid accepted by the liquidity screen
        risk_reward_ratio: Largest accepted max_loss / max_profit multiple
    """
    lot_size: int = 25
    max_bid_ask_spread: float = 2.0
    risk_reward_ratio: float = 3.0

    def __post_init__(self) -> None:
        if not isinstance(self.lot_size, int) or self.lot_size < 1:
            raise ValueError(f"Invalid lot size: {self.lot_size}")
        if self.max_bid_ask_spread < 0:
            raise ValueError("max_bid_ask_spread must be non-negative")
        if self.risk_reward_ratio < 0:
            raise ValueError("risk_reward_ratio must be non-negative")

    @classmethod
    def from_settings(cls, app_settings: Settings) -> "SpreadConstants":
        return cls(
            lot_size=app_settings.LOT_SIZE,
            max_bid_ask_spread=app_settings.MAX_BID_ASK_SPREAD,
            risk_reward_ratio=app_settings.RISK_REWARD_RATIO,
        )


try:
    settings = Settings()
except ValidationError as e:
    logger.error(f"Error loading settings: {e}")
    raise

DEFAULT_CONSTANTS = SpreadConstants.from_settings(settings)
