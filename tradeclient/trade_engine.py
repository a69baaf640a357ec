"""The trade engine: consumes market data and order responses and drives the algorithm."""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Optional, Union

from .features import FeatureEngine
from .order_book import MarketOrderBook
from .order_manager import OrderManager
from .orders import ClientRequest, ClientResponse, ClientResponseType, MarketUpdate, Side
from .positions import PositionKeeper
from .risk import RiskManager, TickerConfigs, config_items
from .strategies import AlgoType, LiquidityTaker, MarketMaker

logger = logging.getLogger(__name__)

_NANOS_PER_SECOND = 1_000_000_000


class TradeEngine:
    """Owns the order books, features, positions, risk and the trading algorithm."""

    def __init__(
        self,
        client_id: int,
        algo_type: AlgoType,
        ticker_cfg: TickerConfigs,
        client_requests: queue.Queue,
        client_responses: queue.Queue,
        market_updates: queue.Queue,
    ) -> None:
        self.client_id = client_id
        self.algo_type = algo_type
        self.client_requests = client_requests
        self.client_responses = client_responses
        self.market_updates = market_updates

        self._books: dict[int, MarketOrderBook] = {}
        self.last_event_time = 0
        self._running = False
        self._thread: Optional[threading.Thread] = None

        self.feature_engine = FeatureEngine()
        self.position_keeper = PositionKeeper()
        self.risk_manager = RiskManager(self.position_keeper, ticker_cfg)
        self.order_manager = OrderManager(client_id, self.risk_manager, self.send_client_request)

        self.algo: Optional[Union[MarketMaker, LiquidityTaker]] = None
        if algo_type is AlgoType.MAKER:
            self.algo = MarketMaker(self.feature_engine, self.order_manager, ticker_cfg)
        elif algo_type is AlgoType.TAKER:
            self.algo = LiquidityTaker(self.feature_engine, self.order_manager, ticker_cfg)

        for ticker_id, cfg in config_items(ticker_cfg).items():
            logger.info("Initialized %s Ticker:%s %s.", algo_type, ticker_id, cfg)

    def book(self, ticker_id: int) -> MarketOrderBook:
        """The order book of a ticker, created on first use."""
        found = self._books.get(ticker_id)
        if found is None:
            found = self._books[ticker_id] = MarketOrderBook(ticker_id, self)
        return found

    def start(self) -> None:
        """Run the engine loop on a background thread."""
        self._running = True
        self._thread = threading.Thread(target=self.run, name="Trading/TradeEngine", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Wait for queued inputs to be consumed, log positions and stop the loop."""
        while self.client_responses.qsize() or self.market_updates.qsize():
            logger.debug(
                "Sleeping till all updates are consumed ogw-size:%s md-size:%s",
                self.client_responses.qsize(),
                self.market_updates.qsize(),
            )
            time.sleep(0.01)
        logger.info("POSITIONS\n%s", self.position_keeper)
        self._running = False
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def run(self) -> None:
        """Process inputs until stopped."""
        logger.info("trade engine running")
        while self._running:
            if not self.poll():
                time.sleep(0.001)

    def poll(self) -> int:
        """Process every response and market update queued now; return how many."""
        processed = 0
        while True:
            try:
                response = self.client_responses.get_nowait()
            except queue.Empty:
                break
            logger.debug("Processing %s", response)
            self.on_order_update(response)
            self.last_event_time = time.monotonic_ns()
            processed += 1

        while True:
            try:
                update = self.market_updates.get_nowait()
            except queue.Empty:
                break
            logger.debug("Processing %s", update)
            if update.ticker_id is None or update.ticker_id < 0:
                raise ValueError(f"Unknown ticker-id on update:{update}")
            self.book(update.ticker_id).on_market_update(update)
            self.last_event_time = time.monotonic_ns()
            processed += 1
        return processed

    def send_client_request(self, request: ClientRequest) -> None:
        """Queue a request for the order gateway."""
        logger.debug("Sending %s", request)
        self.client_requests.put(request)

    def on_order_book_update(
        self, ticker_id: Optional[int], price: Optional[int], side: Side, book: MarketOrderBook
    ) -> None:
        logger.debug("ticker:%s price:%s side:%s", ticker_id, price, side)
        self.position_keeper.update_bbo(ticker_id, book.bbo)
        self.feature_engine.on_order_book_update(ticker_id, price, side, book)
        if self.algo is not None:
            self.algo.on_order_book_update(ticker_id, price, side, book)

    def on_trade_update(self, update: MarketUpdate, book: MarketOrderBook) -> None:
        logger.debug("%s", update)
        self.feature_engine.on_trade_update(update, book)
        if self.algo is not None:
            self.algo.on_trade_update(update, book)

    def on_order_update(self, response: ClientResponse) -> None:
        logger.debug("%s", response)
        if response.type is ClientResponseType.FILLED:
            self.position_keeper.add_fill(response)
        if self.algo is not None:
            self.algo.on_order_update(response)

    def init_last_event_time(self) -> None:
        self.last_event_time = time.monotonic_ns()

    def silent_seconds(self) -> int:
        """Whole seconds since the last processed event."""
        return (time.monotonic_ns() - self.last_event_time) // _NANOS_PER_SECOND