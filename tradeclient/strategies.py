"""Trading algorithms: a passive market maker and an aggressive liquidity taker."""

from __future__ import annotations

import enum
import logging
import math
from typing import Any, Mapping, Optional

from .features import FeatureEngine
from .order_manager import OrderManager
from .orders import ClientResponse, MarketUpdate, Side
from .risk import TickerConfig, TickerConfigs, config_items

logger = logging.getLogger(__name__)


class AlgoType(enum.Enum):
    """The trading algorithm a client runs."""

    INVALID = 0
    RANDOM = 1
    MAKER = 2
    TAKER = 3

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_string(cls, text: str) -> "AlgoType":
        """The algorithm named by text, or INVALID when no algorithm has that name."""
        try:
            return cls[text]
        except KeyError:
            return cls.INVALID


def _config_for(configs: Mapping[int, TickerConfig], ticker_id: Optional[int]) -> Optional[TickerConfig]:
    cfg = configs.get(ticker_id)
    if cfg is None:
        logger.debug("no configuration for ticker %s", ticker_id)
    return cfg


class MarketMaker:
    """Quotes around the fair price, stepping back a tick when the edge is below threshold."""

    def __init__(
        self, feature_engine: FeatureEngine, order_manager: OrderManager, ticker_cfg: TickerConfigs
    ) -> None:
        self.feature_engine = feature_engine
        self.order_manager = order_manager
        self.ticker_cfg = config_items(ticker_cfg)

    def on_order_book_update(
        self, ticker_id: Optional[int], price: Optional[int], side: Side, book: Any
    ) -> None:
        logger.debug("ticker:%s price:%s side:%s", ticker_id, price, side)
        bbo = book.bbo
        fair_price = self.feature_engine.mkt_price
        if not bbo.is_valid() or math.isnan(fair_price):
            return
        cfg = _config_for(self.ticker_cfg, ticker_id)
        if cfg is None:
            return
        logger.debug("%s fair-price:%s", bbo, fair_price)

        bid_price = bbo.bid_price - (0 if fair_price - bbo.bid_price >= cfg.threshold else 1)
        ask_price = bbo.ask_price + (0 if bbo.ask_price - fair_price >= cfg.threshold else 1)
        self.order_manager.move_orders(ticker_id, bid_price, ask_price, cfg.clip)

    def on_trade_update(self, update: MarketUpdate, book: Any) -> None:
        logger.debug("%s", update)

    def on_order_update(self, response: ClientResponse) -> None:
        """Forward an exchange response to the order manager."""
        logger.debug("%s", response)
        self.order_manager.on_order_update(response)


class LiquidityTaker:
    """Follows aggressive trades whose size relative to the touch reaches the threshold."""

    def __init__(
        self, feature_engine: FeatureEngine, order_manager: OrderManager, ticker_cfg: TickerConfigs
    ) -> None:
        self.feature_engine = feature_engine
        self.order_manager = order_manager
        self.ticker_cfg = config_items(ticker_cfg)

    def on_order_book_update(
        self, ticker_id: Optional[int], price: Optional[int], side: Side, book: Any
    ) -> None:
        logger.debug("ticker:%s price:%s side:%s", ticker_id, price, side)

    def on_trade_update(self, update: MarketUpdate, book: Any) -> None:
        logger.debug("%s", update)
        bbo = book.bbo
        ratio = self.feature_engine.agg_trade_qty_ratio
        if not bbo.is_valid() or math.isnan(ratio):
            return
        cfg = _config_for(self.ticker_cfg, update.ticker_id)
        if cfg is None:
            return
        logger.debug("%s agg-qty-ratio:%s", bbo, ratio)

        if ratio >= cfg.threshold:
            if update.side is Side.BUY:
                self.order_manager.move_orders(update.ticker_id, bbo.ask_price, None, cfg.clip)
            else:
                self.order_manager.move_orders(update.ticker_id, None, bbo.bid_price, cfg.clip)

    def on_order_update(self, response: ClientResponse) -> None:
        """Forward an exchange response to the order manager."""
        logger.debug("%s", response)
        self.order_manager.on_order_update(response)