# tradeclient

The core of the client side of an electronic trading system:

* an order book per ticker, rebuilt from market data events;
* trading features taken from that book and from the trade flow;
* position and profit-and-loss tracking;
* a pre-trade risk check on every new order;
* a market-making or a liquidity-taking strategy on top;
* sequencing for market data, with snapshot-based gap recovery;
* sequencing for order requests and responses.

The parts talk to each other through `queue.Queue` objects.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
tradeclient CLIENT_ID ALGO_TYPE [CLIP THRESH MAX_ORDER_SIZE MAX_POS MAX_LOSS] ...
```

* `CLIENT_ID` is the numeric client identifier. It also seeds the random order generator.
* `ALGO_TYPE` is `MAKER`, `TAKER` or `RANDOM`. Any other name gives `AlgoType.INVALID`, and the engine then runs without a strategy.
* Each later group of five values configures one ticker, in order from ticker 0. A count that is not a multiple of five is a usage error.
  * `CLIP` is the order size the strategy uses.
  * `THRESH` is the strategy's signal threshold.
  * `MAX_ORDER_SIZE` is the largest single order the risk check allows.
  * `MAX_POS` is the largest absolute position the risk check allows.
  * `MAX_LOSS` is the total PnL below which new orders are refused. It is usually negative.

Options:

| Option | Default | Meaning |
| --- | --- | --- |
| `--startup-delay` | 10 | Seconds to wait before trading starts |
| `--request-interval` | 0.02 | Seconds between random requests |
| `--silence-limit` | 60 | Seconds without activity after which the client stops |
| `--wait-interval` | 30 | Seconds between activity checks while waiting to stop |
| `--requests` | 10000 | Number of random orders to send with `RANDOM` |

Example:

```
tradeclient 1 MAKER 10 0.25 50 200 -1000 20 0.5 100 400 -2000
```

With `RANDOM`, the client sends new orders spread over 8 tickers. After each new order it sends a cancel of one of its own orders, picked at random from those sent so far. It stops early if it has been silent for the silence limit.

The command logs at INFO level to `trading_main_<CLIENT_ID>.log` in the current directory.

## What this package does not do

The package has no network transport.

* The command never connects to an exchange.
* `OrderGateway` numbers outgoing requests and checks responses handed to it, but it sends and receives nothing over a socket. The command's gateway thread only drains the request queue and logs each request.
* `MarketDataConsumer` works on packets passed to `on_packet`. It does not join any multicast feed.

As a result, a command-line run receives no market data and no order responses.

## Library overview

| Module | Main names | Purpose |
| --- | --- | --- |
| `tradeclient.orders` | `Side`, `MarketUpdate`, `MarketUpdateType`, `ClientRequest`, `ClientResponse`, `MarketOrder`, `BBO`, `OMOrder`, `OMOrderState` | Message and order records |
| `tradeclient.order_book` | `MarketOrderBook` | Price-time ordered book per ticker, with best bid/offer |
| `tradeclient.features` | `FeatureEngine` | Fair market price and aggressive trade quantity ratio |
| `tradeclient.positions` | `PositionInfo`, `PositionKeeper` | Position, volume, and realised and unrealised PnL |
| `tradeclient.risk` | `RiskConfig`, `TickerConfig`, `RiskInfo`, `RiskManager`, `RiskCheckResult` | Pre-trade risk checks |
| `tradeclient.order_manager` | `OrderManager` | One working order per side per ticker: send, move, cancel |
| `tradeclient.strategies` | `AlgoType`, `MarketMaker`, `LiquidityTaker` | Trading algorithms |
| `tradeclient.trade_engine` | `TradeEngine` | Connects the books, features, positions, risk and strategy |
| `tradeclient.market_data` | `MarketDataConsumer` | Sequenced market data with snapshot-based gap recovery |
| `tradeclient.order_gateway` | `OrderGateway` | Sequences outgoing requests and checks incoming responses |
| `tradeclient.cli` | `Settings`, `parse_arguments`, `random_requests`, `main` | Command-line entry point |

### Driving the engine

```python
import queue

from tradeclient.orders import MarketUpdate, MarketUpdateType, Side
from tradeclient.risk import RiskConfig, TickerConfig
from tradeclient.strategies import AlgoType
from tradeclient.trade_engine import TradeEngine

requests, responses, updates = queue.Queue(), queue.Queue(), queue.Queue()
cfg = {0: TickerConfig(clip=10, threshold=0.25, risk_cfg=RiskConfig(50, 200, -1000.0))}
engine = TradeEngine(1, AlgoType.MAKER, cfg, requests, responses, updates)

updates.put(MarketUpdate(MarketUpdateType.ADD, order_id=1, ticker_id=0,
                         side=Side.BUY, price=100, qty=10, priority=1))
engine.poll()                      # 1 event processed
engine.book(0).levels(Side.BUY)    # [(100, 10, 1)]
```

`TradeEngine.start()` runs the same loop on a background thread, and `stop()` ends it. `stop()` first waits for the response and market data queues to empty.

The book refreshes one side of its BBO only when the update is on that side and its price is at or better than the best price held before the update. An order added to an empty side therefore does not change the BBO.

### Risk checks

Before each new order, `RiskManager.check_pre_trade_risk` returns one of these `RiskCheckResult` values:

* `ORDER_TOO_LARGE` when the quantity is above the ticker's maximum order size.
* `POSITION_TOO_LARGE` when the order would take the absolute position above the maximum.
* `LOSS_TOO_LARGE` when the current total PnL is below the maximum loss.
* `ALLOWED` otherwise.

A ticker with no configuration raises `KeyError`.

### Market data recovery

`MarketDataConsumer.on_packet` passes in-sequence incremental updates to the output queue.

1. On a sequence gap, the consumer goes into recovery.
2. During recovery it queues messages from both the snapshot stream and the incremental stream.
3. It leaves recovery once it holds a complete snapshot, numbered from 0, that starts with `SNAPSHOT_START` and ends with `SNAPSHOT_END`.
4. That snapshot must be followed by an unbroken run of queued incrementals. They begin at the sequence number after the one carried in the `order_id` of the `SNAPSHOT_END` message.
5. The recovered events are then published in order, without the start and end markers.

### Order gateway

`OrderGateway.outgoing()` yields each queued request with the next outgoing sequence number.

`OrderGateway.on_response(seq_num, response)` forwards a response only if it carries this client's id and the expected sequence number. It returns whether the response was forwarded.