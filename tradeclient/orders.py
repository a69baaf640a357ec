"""Order, market-update and client-message records shared by the trading client."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


def _fmt(value: object) -> str:
    """Render a field, showing a missing value as INVALID."""
    return "INVALID" if value is None else str(value)


class _NamedEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name


class Side(_NamedEnum):
    """Side of an order; the value is the sign it gives a position."""

    INVALID = 0
    BUY = 1
    SELL = -1

    @property
    def sign(self) -> int:
        return self.value

    @property
    def opposite(self) -> "Side":
        if self is Side.BUY:
            return Side.SELL
        if self is Side.SELL:
            return Side.BUY
        return Side.INVALID


class MarketUpdateType(_NamedEnum):
    INVALID = 0
    CLEAR = 1
    ADD = 2
    MODIFY = 3
    CANCEL = 4
    TRADE = 5
    SNAPSHOT_START = 6
    SNAPSHOT_END = 7


@dataclass
class MarketUpdate:
    """A single market data event published by the exchange."""

    type: MarketUpdateType = MarketUpdateType.INVALID
    order_id: Optional[int] = None
    ticker_id: Optional[int] = None
    side: Side = Side.INVALID
    price: Optional[int] = None
    qty: Optional[int] = None
    priority: Optional[int] = None

    def __str__(self) -> str:
        return (
            f"MarketUpdate[ type:{self.type} ticker:{_fmt(self.ticker_id)} "
            f"oid:{_fmt(self.order_id)} side:{self.side} qty:{_fmt(self.qty)} "
            f"price:{_fmt(self.price)} priority:{_fmt(self.priority)}]"
        )


class ClientRequestType(_NamedEnum):
    INVALID = 0
    NEW = 1
    CANCEL = 2


@dataclass
class ClientRequest:
    """A request sent from the client to the exchange."""

    type: ClientRequestType = ClientRequestType.INVALID
    client_id: Optional[int] = None
    ticker_id: Optional[int] = None
    order_id: Optional[int] = None
    side: Side = Side.INVALID
    price: Optional[int] = None
    qty: Optional[int] = None

    def __str__(self) -> str:
        return (
            f"ClientRequest [type:{self.type} client:{_fmt(self.client_id)} "
            f"ticker:{_fmt(self.ticker_id)} oid:{_fmt(self.order_id)} side:{self.side} "
            f"qty:{_fmt(self.qty)} price:{_fmt(self.price)}]"
        )


class ClientResponseType(_NamedEnum):
    INVALID = 0
    ACCEPTED = 1
    CANCELED = 2
    FILLED = 3
    CANCEL_REJECTED = 4


@dataclass
class ClientResponse:
    """A response sent from the exchange to the client."""

    type: ClientResponseType = ClientResponseType.INVALID
    client_id: Optional[int] = None
    ticker_id: Optional[int] = None
    client_order_id: Optional[int] = None
    market_order_id: Optional[int] = None
    side: Side = Side.INVALID
    price: Optional[int] = None
    exec_qty: Optional[int] = None
    leaves_qty: Optional[int] = None

    def __str__(self) -> str:
        return (
            f"ClientResponse [type:{self.type} client:{_fmt(self.client_id)} "
            f"ticker:{_fmt(self.ticker_id)} coid:{_fmt(self.client_order_id)} "
            f"moid:{_fmt(self.market_order_id)} side:{self.side} "
            f"exec_qty:{_fmt(self.exec_qty)} leaves_qty:{_fmt(self.leaves_qty)} "
            f"price:{_fmt(self.price)}]"
        )


@dataclass
class MarketOrder:
    """An order resting in the client's view of the exchange book."""

    order_id: Optional[int] = None
    side: Side = Side.INVALID
    price: Optional[int] = None
    qty: Optional[int] = None
    priority: Optional[int] = None

    def __str__(self) -> str:
        return (
            f"MarketOrder[oid:{_fmt(self.order_id)} side:{self.side} "
            f"price:{_fmt(self.price)} qty:{_fmt(self.qty)} prio:{_fmt(self.priority)}]"
        )


@dataclass
class BBO:
    """Best bid and offer: top-of-book prices and the total quantity at each."""

    bid_price: Optional[int] = None
    ask_price: Optional[int] = None
    bid_qty: Optional[int] = None
    ask_qty: Optional[int] = None

    def is_valid(self) -> bool:
        """True when both a bid and an ask price are known."""
        return self.bid_price is not None and self.ask_price is not None

    def __str__(self) -> str:
        return (
            f"BBO{{{_fmt(self.bid_qty)}@{_fmt(self.bid_price)}"
            f"X{_fmt(self.ask_price)}@{_fmt(self.ask_qty)}}}"
        )


class OMOrderState(_NamedEnum):
    INVALID = 0
    PENDING_NEW = 1
    LIVE = 2
    PENDING_CANCEL = 3
    DEAD = 4


@dataclass
class OMOrder:
    """An order managed by the client's order manager."""

    ticker_id: Optional[int] = None
    order_id: Optional[int] = None
    side: Side = Side.INVALID
    price: Optional[int] = None
    qty: Optional[int] = None
    order_state: OMOrderState = OMOrderState.INVALID

    def __str__(self) -> str:
        return (
            f"OMOrder[tid:{_fmt(self.ticker_id)} oid:{_fmt(self.order_id)} "
            f"side:{self.side} price:{_fmt(self.price)} qty:{_fmt(self.qty)} "
            f"state:{self.order_state}]"
        )