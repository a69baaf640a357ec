"""Command-line entry point that runs a trading client."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import queue
import random
import sys
import threading
import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Optional, Sequence

from .market_data import MarketDataConsumer
from .order_gateway import OrderGateway
from .orders import ClientRequest, ClientRequestType, Side
from .risk import RiskConfig, TickerConfig
from .strategies import AlgoType
from .trade_engine import TradeEngine

logger = logging.getLogger(__name__)

TICKER_COUNT = 8
"""Number of tickers the random order generator spreads its orders over."""

_GROUP_SIZE = 5
_USAGE = (
    "trading_main CLIENT_ID ALGO_TYPE [CLIP_1 THRESH_1 MAX_ORDER_SIZE_1 MAX_POS_1 MAX_LOSS_1] "
    "[CLIP_2 THRESH_2 MAX_ORDER_SIZE_2 MAX_POS_2 MAX_LOSS_2] ..."
)


@dataclass
class Settings:
    """Everything a trading client run needs, as parsed from the command line."""

    client_id: int
    algo_type: AlgoType
    ticker_cfg: dict[int, TickerConfig] = field(default_factory=dict)
    startup_delay: float = 10.0
    request_interval: float = 0.02
    silence_limit: int = 60
    wait_interval: float = 30.0
    request_count: int = 10000


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trading_main", usage=_USAGE)
    parser.add_argument("client_id", type=int)
    parser.add_argument("algo_type")
    parser.add_argument("ticker_params", nargs="*")
    parser.add_argument("--startup-delay", type=float, default=10.0,
                        help="seconds to wait for the connections before trading")
    parser.add_argument("--request-interval", type=float, default=0.02,
                        help="seconds between random requests")
    parser.add_argument("--silence-limit", type=int, default=60,
                        help="seconds without activity after which the client stops")
    parser.add_argument("--wait-interval", type=float, default=30.0,
                        help="seconds between activity checks while waiting to stop")
    parser.add_argument("--requests", type=int, default=10000, dest="request_count",
                        help="number of random orders to send with the RANDOM algorithm")
    return parser


def _ticker_configs(parser: argparse.ArgumentParser, params: list[str]) -> dict[int, TickerConfig]:
    if len(params) % _GROUP_SIZE:
        parser.error(f"ticker parameters come in groups of {_GROUP_SIZE}, got {len(params)}")
    configs: dict[int, TickerConfig] = {}
    for ticker_id, start in enumerate(range(0, len(params), _GROUP_SIZE)):
        clip, threshold, max_order_size, max_position, max_loss = params[start:start + _GROUP_SIZE]
        try:
            configs[ticker_id] = TickerConfig(
                int(clip),
                float(threshold),
                RiskConfig(int(max_order_size), int(max_position), float(max_loss)),
            )
        except ValueError as exc:
            parser.error(f"bad parameter for ticker {ticker_id}: {exc}")
    return configs


def parse_arguments(argv: Optional[Sequence[str]]) -> Settings:
    """Parse the command line; exits with a usage message when it is malformed."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    return Settings(
        client_id=args.client_id,
        algo_type=AlgoType.from_string(args.algo_type),
        ticker_cfg=_ticker_configs(parser, args.ticker_params),
        startup_delay=args.startup_delay,
        request_interval=args.request_interval,
        silence_limit=args.silence_limit,
        wait_interval=args.wait_interval,
        request_count=args.request_count,
    )


def random_requests(
    client_id: int, count: int, rng: random.Random
) -> Iterator[tuple[ClientRequest, ClientRequest]]:
    """Yield count pairs of a new order and a cancel of a random order sent so far."""
    order_id = client_id * 1000
    base_prices = [rng.randrange(100) + 100 for _ in range(TICKER_COUNT)]
    sent: list[ClientRequest] = []
    for _ in range(count):
        ticker_id = rng.randrange(TICKER_COUNT)
        price = base_prices[ticker_id] + rng.randrange(10) + 1
        qty = 1 + rng.randrange(100) + 1
        side = Side.BUY if rng.randrange(2) else Side.SELL
        new_request = ClientRequest(
            ClientRequestType.NEW, client_id, ticker_id, order_id, side, price, qty
        )
        order_id += 1
        sent.append(new_request)
        cancel = dataclasses.replace(sent[rng.randrange(len(sent))], type=ClientRequestType.CANCEL)
        yield new_request, cancel


def _pump_gateway(gateway: OrderGateway, stop: threading.Event) -> None:
    while True:
        for seq_num, request in gateway.outgoing():
            logger.debug("Gateway seq:%s %s", seq_num, request)
        if stop.wait(0.001):
            break
    for seq_num, request in gateway.outgoing():
        logger.debug("Gateway seq:%s %s", seq_num, request)


def _run(settings: Settings) -> None:
    client_requests: queue.Queue = queue.Queue()
    client_responses: queue.Queue = queue.Queue()
    market_updates: queue.Queue = queue.Queue()

    logger.info("Starting Trade Engine...")
    engine = TradeEngine(
        settings.client_id,
        settings.algo_type,
        settings.ticker_cfg,
        client_requests,
        client_responses,
        market_updates,
    )
    engine.start()

    logger.info("Starting Order Gateway...")
    gateway = OrderGateway(settings.client_id, client_requests, client_responses)
    stop_gateway = threading.Event()
    gateway_thread = threading.Thread(
        target=_pump_gateway, args=(gateway, stop_gateway), name="Trading/OrderGateway", daemon=True
    )
    gateway_thread.start()

    logger.info("Starting Market Data Consumer...")
    consumer = MarketDataConsumer(market_updates)
    logger.debug("market data consumer expecting seq:%s", consumer.next_exp_inc_seq_num)

    try:
        time.sleep(settings.startup_delay)
        engine.init_last_event_time()

        if settings.algo_type is AlgoType.RANDOM:
            rng = random.Random(settings.client_id)
            for new_request, cancel in random_requests(
                settings.client_id, settings.request_count, rng
            ):
                engine.send_client_request(new_request)
                time.sleep(settings.request_interval)
                engine.send_client_request(cancel)
                time.sleep(settings.request_interval)
                if engine.silent_seconds() >= settings.silence_limit:
                    logger.info(
                        "Stopping early because been silent for %s seconds...",
                        engine.silent_seconds(),
                    )
                    break

        while engine.silent_seconds() < settings.silence_limit:
            logger.info(
                "Waiting till no activity, been silent for %s seconds...", engine.silent_seconds()
            )
            time.sleep(settings.wait_interval)
    finally:
        engine.stop()
        stop_gateway.set()
        gateway_thread.join()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run a trading client until it has been silent long enough."""
    settings = parse_arguments(argv)
    root = logging.getLogger()
    handler = logging.FileHandler(f"trading_main_{settings.client_id}.log")
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    handler.setLevel(logging.INFO)
    old_level = root.level
    root.addHandler(handler)
    root.setLevel(logging.INFO)
    try:
        _run(settings)
    finally:
        root.removeHandler(handler)
        root.setLevel(old_level)
        handler.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())