from types import SimpleNamespace

from tradeclient.features import FeatureEngine
from tradeclient.orders import BBO, MarketUpdate, MarketUpdateType, Side


def _book(bid_price=None, ask_price=None, bid_qty=None, ask_qty=None):
    return SimpleNamespace(bbo=BBO(bid_price, ask_price, bid_qty, ask_qty))


def _trade(side, qty):
    return MarketUpdate(MarketUpdateType.TRADE, 1, 0, side, 100, qty, None)


def test_features_start_invalid():
    engine = FeatureEngine()
    assert str(engine.mkt_price) == "nan"
    assert str(engine.agg_trade_qty_ratio) == "nan"


def test_invalid_bbo_leaves_price_unset():
    engine = FeatureEngine()
    engine.on_order_book_update(0, 100, Side.BUY, _book(bid_price=100, bid_qty=5))
    assert str(engine.mkt_price) == "nan"


def test_equal_quantities_give_midpoint():
    engine = FeatureEngine()
    engine.on_order_book_update(0, 100, Side.BUY, _book(100, 102, 5, 5))
    assert engine.mkt_price == 101.0


def test_heavier_ask_pulls_price_toward_bid():
    engine = FeatureEngine()
    engine.on_order_book_update(0, 100, Side.BUY, _book(100, 102, 10, 30))
    assert 100 < engine.mkt_price < (100 + 102) / 2


def test_heavier_bid_pulls_price_toward_ask():
    engine = FeatureEngine()
    engine.on_order_book_update(0, 100, Side.BUY, _book(100, 102, 30, 10))
    assert (100 + 102) / 2 < engine.mkt_price < 102


def test_buy_trade_ratio_uses_ask_quantity():
    engine = FeatureEngine()
    engine.on_trade_update(_trade(Side.BUY, 15), _book(100, 102, 10, 30))
    assert engine.agg_trade_qty_ratio == 0.5


def test_sell_trade_ratio_uses_bid_quantity():
    engine = FeatureEngine()
    engine.on_trade_update(_trade(Side.SELL, 10), _book(100, 102, 10, 30))
    assert engine.agg_trade_qty_ratio == 1.0


def test_trade_with_invalid_bbo_leaves_ratio_unset():
    engine = FeatureEngine()
    engine.on_trade_update(_trade(Side.BUY, 10), _book(ask_price=102, ask_qty=5))
    assert str(engine.agg_trade_qty_ratio) == "nan"


def test_book_update_does_not_touch_ratio():
    engine = FeatureEngine()
    engine.on_order_book_update(0, 100, Side.BUY, _book(100, 102, 5, 5))
    assert engine.mkt_price == 101.0
    assert str(engine.agg_trade_qty_ratio) == "nan"