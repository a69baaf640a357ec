"""Keeps one working order per ticker and side, and moves it toward target prices."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .orders import (
    ClientRequest,
    ClientRequestType,
    ClientResponse,
    ClientResponseType,
    OMOrder,
    OMOrderState,
    Side,
)
from .risk import RiskCheckResult, RiskManager

logger = logging.getLogger(__name__)


class OrderManager:
    """Sends new and cancel requests and tracks order state from exchange responses."""

    def __init__(
        self,
        client_id: int,
        risk_manager: RiskManager,
        send_request: Callable[[ClientRequest], object],
    ) -> None:
        self.client_id = client_id
        self.risk_manager = risk_manager
        self._send_request = send_request
        self._orders: dict[int, dict[Side, OMOrder]] = {}
        self.next_order_id = 1

    def side_orders(self, ticker_id: int) -> dict[Side, OMOrder]:
        """The buy and sell orders of a ticker."""
        return self._orders.setdefault(ticker_id, {Side.BUY: OMOrder(), Side.SELL: OMOrder()})

    def on_order_update(self, response: ClientResponse) -> None:
        """Update the matching order from an exchange response."""
        order = self.side_orders(response.ticker_id)[response.side]
        logger.debug("%s %s", response, order)

        kind = response.type
        if kind is ClientResponseType.ACCEPTED:
            order.order_state = OMOrderState.LIVE
        elif kind is ClientResponseType.CANCELED:
            order.order_state = OMOrderState.DEAD
        elif kind is ClientResponseType.FILLED:
            order.qty = response.leaves_qty
            if not order.qty:
                order.order_state = OMOrderState.DEAD

    def new_order(self, order: OMOrder, ticker_id: int, price: int, side: Side, qty: int) -> None:
        """Send a new order and record it as pending."""
        request = ClientRequest(
            ClientRequestType.NEW, self.client_id, ticker_id, self.next_order_id, side, price, qty
        )
        self._send_request(request)

        order.ticker_id = ticker_id
        order.order_id = self.next_order_id
        order.side = side
        order.price = price
        order.qty = qty
        order.order_state = OMOrderState.PENDING_NEW
        self.next_order_id += 1
        logger.debug("Sent new order %s for %s", request, order)

    def cancel_order(self, order: OMOrder) -> None:
        """Send a cancel for an order and mark it pending cancel."""
        request = ClientRequest(
            ClientRequestType.CANCEL,
            self.client_id,
            order.ticker_id,
            order.order_id,
            order.side,
            order.price,
            order.qty,
        )
        self._send_request(request)
        order.order_state = OMOrderState.PENDING_CANCEL
        logger.debug("Sent cancel %s for %s", request, order)

    def move_order(
        self, order: OMOrder, ticker_id: int, price: Optional[int], side: Side, qty: int
    ) -> None:
        """Cancel a live order at another price, or place one where none is working."""
        state = order.order_state
        if state is OMOrderState.LIVE:
            if order.price != price:
                self.cancel_order(order)
        elif state in (OMOrderState.INVALID, OMOrderState.DEAD):
            if price is not None:
                result = self.risk_manager.check_pre_trade_risk(ticker_id, side, qty)
                if result is RiskCheckResult.ALLOWED:
                    self.new_order(order, ticker_id, price, side, qty)
                else:
                    logger.info(
                        "Ticker:%s Side:%s Qty:%s RiskCheckResult:%s", ticker_id, side, qty, result
                    )

    def move_orders(
        self, ticker_id: int, bid_price: Optional[int], ask_price: Optional[int], clip: int
    ) -> None:
        """Move the bid and the ask of a ticker; a price of None places nothing on that side."""
        orders = self.side_orders(ticker_id)
        self.move_order(orders[Side.BUY], ticker_id, bid_price, Side.BUY, clip)
        self.move_order(orders[Side.SELL], ticker_id, ask_price, Side.SELL, clip)