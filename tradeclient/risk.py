"""Pre-trade risk checks against per-ticker limits."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Union

from .orders import Side
from .positions import PositionInfo, PositionKeeper


class RiskCheckResult(enum.Enum):
    INVALID = 0
    ORDER_TOO_LARGE = 1
    POSITION_TOO_LARGE = 2
    LOSS_TOO_LARGE = 3
    ALLOWED = 4

    def __str__(self) -> str:
        return self.name


@dataclass
class RiskConfig:
    """Risk limits for one ticker."""

    max_order_size: int = 0
    max_position: int = 0
    max_loss: float = 0.0

    def __str__(self) -> str:
        return (
            f"RiskCfg{{max-order-size:{self.max_order_size} "
            f"max-position:{self.max_position} max-loss:{self.max_loss:g}}}"
        )


@dataclass
class TickerConfig:
    """Trading parameters for one ticker: order size, signal threshold and risk limits."""

    clip: int = 0
    threshold: float = 0.0
    risk_cfg: RiskConfig = field(default_factory=RiskConfig)

    def __str__(self) -> str:
        return f"TradeEngineCfg{{clip:{self.clip} thresh:{self.threshold:g} risk:{self.risk_cfg}}}"


TickerConfigs = Union[Mapping[int, TickerConfig], "list[TickerConfig]", "tuple[TickerConfig, ...]"]


def config_items(ticker_cfg: TickerConfigs) -> dict[int, TickerConfig]:
    """Ticker configurations keyed by ticker id, from a mapping or a sequence."""
    if isinstance(ticker_cfg, Mapping):
        return dict(ticker_cfg)
    return dict(enumerate(ticker_cfg))


@dataclass
class RiskInfo:
    """A ticker's live position together with its risk limits."""

    position_info: PositionInfo
    risk_cfg: RiskConfig

    def check_pre_trade_risk(self, side: Side, qty: int) -> RiskCheckResult:
        if qty > self.risk_cfg.max_order_size:
            return RiskCheckResult.ORDER_TOO_LARGE
        if abs(self.position_info.position + side.sign * qty) > self.risk_cfg.max_position:
            return RiskCheckResult.POSITION_TOO_LARGE
        if self.position_info.total_pnl < self.risk_cfg.max_loss:
            return RiskCheckResult.LOSS_TOO_LARGE
        return RiskCheckResult.ALLOWED

    def __str__(self) -> str:
        return f"RiskInfo[pos:{self.position_info} {self.risk_cfg}]"


class RiskManager:
    """Checks orders against each configured ticker's limits and live position."""

    def __init__(self, position_keeper: PositionKeeper, ticker_cfg: TickerConfigs) -> None:
        self._ticker_risk = {
            ticker_id: RiskInfo(position_keeper.position_info(ticker_id), cfg.risk_cfg)
            for ticker_id, cfg in config_items(ticker_cfg).items()
        }

    def check_pre_trade_risk(self, ticker_id: int, side: Side, qty: int) -> RiskCheckResult:
        """Check an order; raises KeyError for a ticker with no configuration."""
        try:
            info = self._ticker_risk[ticker_id]
        except KeyError:
            raise KeyError(f"no risk configuration for ticker {ticker_id}") from None
        return info.check_pre_trade_risk(side, qty)