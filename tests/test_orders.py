from tradeclient.orders import (
    BBO,
    ClientRequest,
    ClientRequestType,
    ClientResponse,
    ClientResponseType,
    MarketOrder,
    MarketUpdate,
    MarketUpdateType,
    OMOrder,
    OMOrderState,
    Side,
)


def test_side_sign_and_opposite():
    buy = MarketOrder(1, Side.BUY, 100, 1, 1)
    sell = MarketOrder(2, Side.SELL, 101, 1, 1)
    assert buy.side.sign == 1
    assert sell.side.sign == -1
    assert buy.side.opposite is Side.SELL
    assert sell.side.opposite is Side.BUY
    assert OMOrder().side.opposite is Side.INVALID


def test_side_str_is_name():
    assert "side:BUY" in str(MarketOrder(1, Side.BUY, 100, 1, 1))
    assert "side:SELL" in str(MarketOrder(1, Side.SELL, 100, 1, 1))


def test_bbo_default_is_invalid():
    bbo = BBO()
    assert bbo.is_valid() is False
    assert str(bbo) == "BBO{INVALID@INVALIDXINVALID@INVALID}"


def test_bbo_valid_needs_both_prices():
    assert BBO(bid_price=100).is_valid() is False
    assert BBO(ask_price=101).is_valid() is False
    assert BBO(bid_price=100, ask_price=101).is_valid() is True


def test_bbo_str():
    bbo = BBO(bid_price=100, ask_price=101, bid_qty=10, ask_qty=5)
    assert str(bbo) == "BBO{10@100X101@5}"


def test_om_order_state_names():
    names = [str(OMOrder(order_state=state)).split("state:")[1].rstrip("]") for state in OMOrderState]
    assert names == ["INVALID", "PENDING_NEW", "LIVE", "PENDING_CANCEL", "DEAD"]


def test_om_order_defaults_and_str():
    order = OMOrder()
    assert order.order_state is OMOrderState.INVALID
    assert "state:INVALID" in str(order)
    order = OMOrder(1, 7, Side.BUY, 100, 10, OMOrderState.LIVE)
    assert str(order) == "OMOrder[tid:1 oid:7 side:BUY price:100 qty:10 state:LIVE]"


def test_market_order_str():
    order = MarketOrder(3, Side.SELL, 105, 20, 2)
    assert str(order) == "MarketOrder[oid:3 side:SELL price:105 qty:20 prio:2]"


def test_market_order_is_mutable():
    order = MarketOrder(3, Side.SELL, 105, 20, 2)
    order.qty = 4
    assert order.qty == 4


def test_messages_carry_fields():
    update = MarketUpdate(MarketUpdateType.ADD, order_id=1, ticker_id=0, side=Side.BUY, price=99, qty=3, priority=1)
    assert "type:ADD" in str(update)
    assert update.price == 99
    request = ClientRequest(ClientRequestType.NEW, client_id=4, ticker_id=0, order_id=9, side=Side.SELL, price=98, qty=2)
    assert "oid:9" in str(request)
    response = ClientResponse(ClientResponseType.FILLED, client_id=4, ticker_id=0, client_order_id=9,
                              market_order_id=11, side=Side.SELL, price=98, exec_qty=2, leaves_qty=0)
    assert "type:FILLED" in str(response)
    assert response.leaves_qty == 0