import pytest

from tradeclient.order_book import MarketOrderBook
from tradeclient.orders import MarketUpdate, MarketUpdateType, Side


class Recorder:
    def __init__(self):
        self.book_updates = []
        self.trades = []

    def on_order_book_update(self, ticker_id, price, side, book):
        self.book_updates.append((ticker_id, price, side, book))

    def on_trade_update(self, update, book):
        self.trades.append((update, book))


def send(book, kind, oid=None, side=Side.INVALID, price=None, qty=None, prio=1):
    book.on_market_update(
        MarketUpdate(kind, order_id=oid, ticker_id=book.ticker_id, side=side, price=price, qty=qty, priority=prio)
    )


def add(book, oid, side, price, qty):
    send(book, MarketUpdateType.ADD, oid, side, price, qty)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def book(recorder):
    return MarketOrderBook(0, recorder)


def test_add_notifies_listener(book, recorder):
    add(book, 1, Side.BUY, 100, 10)
    assert recorder.book_updates == [(0, 100, Side.BUY, book)]
    assert book.levels(Side.BUY) == [(100, 10, 1)]


def test_first_add_on_empty_side_leaves_bbo_untouched(book):
    add(book, 1, Side.BUY, 100, 10)
    assert book.bbo.bid_price is None
    assert book.bbo.bid_qty is None


def test_better_bid_updates_bbo(book):
    add(book, 1, Side.BUY, 100, 10)
    add(book, 2, Side.BUY, 101, 7)
    assert book.bbo.bid_price == 101
    assert book.bbo.bid_qty == 7


def test_same_level_quantity_sums(book):
    add(book, 1, Side.SELL, 105, 4)
    add(book, 2, Side.SELL, 105, 6)
    assert book.bbo.ask_price == 105
    assert book.bbo.ask_qty == 4 + 6
    assert book.levels(Side.SELL) == [(105, 4 + 6, 2)]


def test_levels_sorted_best_first(book):
    for oid, price in enumerate([100, 102, 98, 101], start=1):
        add(book, oid, Side.BUY, price, 1)
    for oid, price in enumerate([110, 107, 112], start=10):
        add(book, oid, Side.SELL, price, 1)
    bid_prices = [price for price, _, _ in book.levels(Side.BUY)]
    ask_prices = [price for price, _, _ in book.levels(Side.SELL)]
    assert bid_prices == [102, 101, 100, 98]
    assert ask_prices == [107, 110, 112]


def test_cancel_best_bid_moves_bbo(book):
    add(book, 1, Side.BUY, 100, 10)
    add(book, 2, Side.BUY, 101, 7)
    send(book, MarketUpdateType.CANCEL, 2, Side.BUY, 101, 7)
    assert book.bbo.bid_price == 100
    assert book.bbo.bid_qty == 10
    assert book.levels(Side.BUY) == [(100, 10, 1)]


def test_cancel_last_order_empties_side(book):
    add(book, 1, Side.BUY, 100, 10)
    add(book, 2, Side.BUY, 101, 7)
    send(book, MarketUpdateType.CANCEL, 1, Side.BUY, 100, 10)
    send(book, MarketUpdateType.CANCEL, 2, Side.BUY, 101, 7)
    assert book.levels(Side.BUY) == []
    assert book.bbo.bid_price is None


def test_modify_changes_quantity(book):
    add(book, 1, Side.SELL, 105, 4)
    add(book, 2, Side.SELL, 104, 6)
    send(book, MarketUpdateType.MODIFY, 2, Side.SELL, 104, 3)
    assert book.bbo.ask_qty == 3
    assert book.levels(Side.SELL)[0] == (104, 3, 1)


def test_unknown_order_raises(book):
    add(book, 1, Side.BUY, 100, 10)
    with pytest.raises(KeyError):
        send(book, MarketUpdateType.CANCEL, 99, Side.BUY, 100, 1)
    with pytest.raises(KeyError):
        send(book, MarketUpdateType.MODIFY, 99, Side.BUY, 100, 1)
    assert book.levels(Side.BUY) == [(100, 10, 1)]


def test_trade_goes_to_listener_only(book, recorder):
    add(book, 1, Side.BUY, 100, 10)
    before = len(recorder.book_updates)
    send(book, MarketUpdateType.TRADE, None, Side.SELL, 100, 3)
    assert len(recorder.trades) == 1
    assert recorder.trades[0][0].qty == 3
    assert len(recorder.book_updates) == before
    assert book.levels(Side.BUY) == [(100, 10, 1)]


def test_clear_empties_book(book):
    add(book, 1, Side.BUY, 100, 10)
    add(book, 2, Side.SELL, 105, 4)
    send(book, MarketUpdateType.CLEAR)
    assert book.levels(Side.BUY) == []
    assert book.levels(Side.SELL) == []
    with pytest.raises(KeyError):
        send(book, MarketUpdateType.CANCEL, 1, Side.BUY, 100, 10)


def test_update_bbo_direct(book):
    add(book, 1, Side.BUY, 100, 10)
    add(book, 2, Side.SELL, 105, 4)
    book.update_bbo(True, True)
    assert book.bbo.is_valid()
    assert (book.bbo.bid_price, book.bbo.bid_qty) == (100, 10)
    assert (book.bbo.ask_price, book.bbo.ask_qty) == (105, 4)


def test_book_without_listener(recorder):
    book = MarketOrderBook(3, None)
    add(book, 1, Side.SELL, 105, 4)
    assert book.levels(Side.SELL) == [(105, 4, 1)]


def test_to_string_detailed(book):
    add(book, 1, Side.BUY, 100, 10)
    add(book, 2, Side.SELL, 101, 5)
    text = book.to_string(True, True)
    lines = text.split("\n")
    assert lines[0] == "Ticker:0"
    assert lines[1] == "ASKS L:0 =>  <px:101 p:101 n:101> 101 @ 5    (1   )[oid:2 q:5 p:2 n:2] "
    assert "                          X" in lines
    assert lines[-2].startswith("BIDS L:0 =>  <px:100")


def test_to_string_level_order(book):
    for oid, price in enumerate([103, 101, 102], start=1):
        add(book, oid, Side.SELL, price, 1)
    text = book.to_string(False, True)
    ask_lines = [line for line in text.split("\n") if line.startswith("ASKS")]
    assert [line.split()[1] for line in ask_lines] == ["L:0", "L:1", "L:2"]
    assert "<px:101 p:103 n:102>" in ask_lines[0]
    assert "[oid:" not in text