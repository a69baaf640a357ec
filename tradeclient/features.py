"""Signals derived from the order book and trade flow."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional

from .orders import MarketUpdate, Side

logger = logging.getLogger(__name__)

FEATURE_INVALID = math.nan


class FeatureEngine:
    """Computes a fair market price and an aggressive-trade quantity ratio."""

    def __init__(self) -> None:
        self.mkt_price: float = FEATURE_INVALID
        self.agg_trade_qty_ratio: float = FEATURE_INVALID

    def on_order_book_update(
        self, ticker_id: Optional[int], price: Optional[int], side: Side, book: Any
    ) -> None:
        """Recompute the quantity-weighted fair price from the book's BBO."""
        bbo = book.bbo
        if bbo.is_valid():
            self.mkt_price = (bbo.bid_price * bbo.ask_qty + bbo.ask_price * bbo.bid_qty) / float(
                bbo.bid_qty + bbo.ask_qty
            )
        logger.debug(
            "ticker:%s price:%s side:%s mkt-price:%s agg-trade-ratio:%s",
            ticker_id,
            price,
            side,
            self.mkt_price,
            self.agg_trade_qty_ratio,
        )

    def on_trade_update(self, update: MarketUpdate, book: Any) -> None:
        """Recompute the ratio of a trade's size to the quantity it traded against."""
        bbo = book.bbo
        if bbo.is_valid():
            against = bbo.ask_qty if update.side is Side.BUY else bbo.bid_qty
            self.agg_trade_qty_ratio = float(update.qty) / against
        logger.debug(
            "%s mkt-price:%s agg-trade-ratio:%s", update, self.mkt_price, self.agg_trade_qty_ratio
        )