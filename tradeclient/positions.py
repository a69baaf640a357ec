"""Positions, volume and profit and loss per ticker."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .orders import BBO, ClientResponse, Side

logger = logging.getLogger(__name__)


def _open_vwap_default() -> dict[Side, float]:
    return {Side.BUY: 0.0, Side.SELL: 0.0}


@dataclass
class PositionInfo:
    """Position and PnL for one ticker; open_vwap holds price times quantity per side."""

    position: int = 0
    real_pnl: float = 0.0
    unreal_pnl: float = 0.0
    total_pnl: float = 0.0
    open_vwap: dict[Side, float] = field(default_factory=_open_vwap_default)
    volume: int = 0
    bbo: Optional[BBO] = None

    def _avg_open(self, side: Side) -> float:
        return self.open_vwap[side] / abs(self.position) if self.position else 0

    def __str__(self) -> str:
        return (
            f"Position{{pos:{self.position} u-pnl:{self.unreal_pnl:g} "
            f"r-pnl:{self.real_pnl:g} t-pnl:{self.total_pnl:g} vol:{self.volume} "
            f"vwaps:[{self._avg_open(Side.BUY):g}X{self._avg_open(Side.SELL):g}] "
            f"{self.bbo if self.bbo is not None else ''}}}"
        )

    def _unrealized_at(self, price: float) -> float:
        size = abs(self.position)
        if self.position > 0:
            return (price - self.open_vwap[Side.BUY] / size) * size
        return (self.open_vwap[Side.SELL] / size - price) * size

    def add_fill(self, response: ClientResponse) -> None:
        """Apply an execution to the position and PnL."""
        side = response.side
        opposite = side.opposite
        sign = side.sign
        old_position = self.position
        self.position += sign * response.exec_qty
        self.volume += response.exec_qty

        if old_position * sign >= 0:
            self.open_vwap[side] += response.price * response.exec_qty
        else:
            opp_vwap = self.open_vwap[opposite] / abs(old_position)
            self.open_vwap[opposite] = opp_vwap * abs(self.position)
            self.real_pnl += (
                min(response.exec_qty, abs(old_position)) * (opp_vwap - response.price) * sign
            )
            if self.position * old_position < 0:
                self.open_vwap[side] = float(response.price * abs(self.position))
                self.open_vwap[opposite] = 0.0

        if not self.position:
            self.open_vwap[Side.BUY] = self.open_vwap[Side.SELL] = 0.0
            self.unreal_pnl = 0.0
        else:
            self.unreal_pnl = self._unrealized_at(response.price)

        self.total_pnl = self.unreal_pnl + self.real_pnl
        logger.debug("%s %s", self, response)

    def update_bbo(self, bbo: BBO) -> None:
        """Mark the open position to the BBO mid price."""
        self.bbo = bbo
        if self.position and bbo.is_valid():
            mid_price = (bbo.bid_price + bbo.ask_price) * 0.5
            self.unreal_pnl = self._unrealized_at(mid_price)
            old_total = self.total_pnl
            self.total_pnl = self.unreal_pnl + self.real_pnl
            if self.total_pnl != old_total:
                logger.debug("%s %s", self, bbo)


class PositionKeeper:
    """Holds a PositionInfo for every ticker traded."""

    def __init__(self) -> None:
        self._positions: dict[int, PositionInfo] = {}

    def position_info(self, ticker_id: int) -> PositionInfo:
        """The position record of a ticker; the same object on every call."""
        return self._positions.setdefault(ticker_id, PositionInfo())

    def add_fill(self, response: ClientResponse) -> None:
        self.position_info(response.ticker_id).add_fill(response)

    def update_bbo(self, ticker_id: int, bbo: BBO) -> None:
        self.position_info(ticker_id).update_bbo(bbo)

    def __str__(self) -> str:
        lines = []
        total_pnl = 0.0
        total_vol = 0
        for ticker_id in sorted(self._positions):
            info = self._positions[ticker_id]
            lines.append(f"TickerId:{ticker_id} {info}\n")
            total_pnl += info.total_pnl
            total_vol += info.volume
        lines.append(f"Total PnL:{total_pnl:g} Vol:{total_vol}\n")
        return "".join(lines)