"""The client's reconstruction of the exchange order book for one ticker."""

from __future__ import annotations

import logging
import operator
from typing import Any, Optional, Protocol

from sortedcontainers import SortedDict

from .orders import BBO, MarketOrder, MarketUpdate, MarketUpdateType, Side, _fmt

logger = logging.getLogger(__name__)


class _BookListener(Protocol):
    def on_trade_update(self, update: MarketUpdate, book: "MarketOrderBook") -> Any: ...

    def on_order_book_update(
        self, ticker_id: Optional[int], price: Optional[int], side: Side, book: "MarketOrderBook"
    ) -> Any: ...


class MarketOrderBook:
    """Price levels of resting orders, kept in FIFO order within each level."""

    def __init__(self, ticker_id: int, listener: Optional[_BookListener] = None) -> None:
        self.ticker_id = ticker_id
        self.listener = listener
        self.bbo = BBO()
        self._orders: dict[int, MarketOrder] = {}
        # Both sides iterate best price first.
        self._bids: SortedDict = SortedDict(operator.neg)
        self._asks: SortedDict = SortedDict()

    def _side_levels(self, side: Side) -> SortedDict:
        if side is Side.BUY:
            return self._bids
        if side is Side.SELL:
            return self._asks
        raise ValueError(f"no book side for {side}")

    def _best_price(self, side: Side) -> Optional[int]:
        levels = self._side_levels(side)
        return levels.peekitem(0)[0] if levels else None

    def _add_order(self, order: MarketOrder) -> None:
        self._side_levels(order.side).setdefault(order.price, {})[order.order_id] = order
        self._orders[order.order_id] = order

    def _remove_order(self, order: MarketOrder) -> None:
        levels = self._side_levels(order.side)
        level = levels[order.price]
        del level[order.order_id]
        if not level:
            del levels[order.price]
        del self._orders[order.order_id]

    def on_market_update(self, update: MarketUpdate) -> None:
        """Apply a market data event and notify the listener."""
        best_bid = self._best_price(Side.BUY)
        best_ask = self._best_price(Side.SELL)
        bid_updated = (
            best_bid is not None
            and update.side is Side.BUY
            and update.price is not None
            and update.price >= best_bid
        )
        ask_updated = (
            best_ask is not None
            and update.side is Side.SELL
            and update.price is not None
            and update.price <= best_ask
        )

        kind = update.type
        if kind is MarketUpdateType.ADD:
            self._add_order(
                MarketOrder(update.order_id, update.side, update.price, update.qty, update.priority)
            )
        elif kind is MarketUpdateType.MODIFY:
            self._orders[update.order_id].qty = update.qty
        elif kind is MarketUpdateType.CANCEL:
            self._remove_order(self._orders[update.order_id])
        elif kind is MarketUpdateType.TRADE:
            if self.listener is not None:
                self.listener.on_trade_update(update, self)
            return
        elif kind is MarketUpdateType.CLEAR:
            self._orders.clear()
            self._bids.clear()
            self._asks.clear()

        self.update_bbo(bid_updated, ask_updated)
        logger.debug("%s %s", update, self.bbo)

        if self.listener is not None:
            self.listener.on_order_book_update(update.ticker_id, update.price, update.side, self)

    def update_bbo(self, update_bid: bool, update_ask: bool) -> None:
        """Recompute the requested sides of the best bid and offer."""
        if update_bid:
            self.bbo.bid_price, self.bbo.bid_qty = self._top(self._bids)
        if update_ask:
            self.bbo.ask_price, self.bbo.ask_qty = self._top(self._asks)

    @staticmethod
    def _top(levels: SortedDict) -> tuple[Optional[int], Optional[int]]:
        if not levels:
            return None, None
        price, orders = levels.peekitem(0)
        return price, sum(order.qty for order in orders.values())

    def levels(self, side: Side) -> list[tuple[int, int, int]]:
        """(price, total quantity, number of orders) per level, best price first."""
        return [
            (price, sum(order.qty for order in orders.values()), len(orders))
            for price, orders in self._side_levels(side).items()
        ]

    def to_string(self, detailed: bool, validity_check: bool) -> str:
        """Render the book, asks then bids, each from the best level outward."""
        parts = [f"Ticker:{_fmt(self.ticker_id)}\n"]
        parts.extend(self._render_side("ASKS", Side.SELL, detailed, validity_check))
        parts.append("\n                          X\n\n")
        parts.extend(self._render_side("BIDS", Side.BUY, detailed, validity_check))
        return "".join(parts)

    def _render_side(self, label: str, side: Side, detailed: bool, validity_check: bool):
        levels = self._side_levels(side)
        prices = list(levels.keys())
        last_price: Optional[int] = None
        for count, price in enumerate(prices):
            orders = list(levels[price].values())
            prev_price = prices[count - 1]
            next_price = prices[(count + 1) % len(prices)]
            qty = sum(order.qty for order in orders)
            line = (
                f"{label} L:{count} => "
                f" <px:{_fmt(price):>3} p:{_fmt(prev_price):>3} n:{_fmt(next_price):>3}>"
                f" {_fmt(price):<3} @ {_fmt(qty):<5}({len(orders)!s:<4})"
            )
            if detailed:
                for index, order in enumerate(orders):
                    prev_order = orders[index - 1]
                    next_order = orders[(index + 1) % len(orders)]
                    line += (
                        f"[oid:{_fmt(order.order_id)} q:{_fmt(order.qty)} "
                        f"p:{_fmt(prev_order.order_id)} n:{_fmt(next_order.order_id)}] "
                    )
            yield line + "\n"

            if validity_check:
                if last_price is not None and (
                    (side is Side.SELL and last_price >= price)
                    or (side is Side.BUY and last_price <= price)
                ):
                    raise RuntimeError(
                        f"Bids/Asks not sorted by ascending/descending prices last:{last_price} "
                        f"itr:{price}"
                    )
                last_price = price