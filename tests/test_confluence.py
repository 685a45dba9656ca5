from fx_coach.confluence import build_confluence
from fx_coach.models import BollingerBands, BosEvent, Indicators, MarketStructure, PatternResult


def _structure(trend: str) -> MarketStructure:
    bias = {"uptrend": "buy_bias", "downtrend": "sell_bias"}.get(trend, "neutral")
    return MarketStructure(trend=trend, bias=bias)


def _bos(status: str) -> BosEvent:
    return BosEvent(status=status, direction=None, label=None, price=None, time_ms=None, note="")


def _ind(rsi=50.0, price=1.0, mid=1.0) -> Indicators:
    bb = None if mid is None else BollingerBands(middle=mid, upper=mid + 0.1, lower=mid - 0.1)
    return Indicators(sma_fast=None, sma_slow=None, rsi=rsi, atr=None, bb=bb, price=price)


def _pattern(direction: str = "neutral", confidence: float = 0.1) -> PatternResult:
    return PatternResult(name="Test", direction=direction, confidence=confidence, note="")


def test_all_bullish_is_strong_buy():
    res = build_confluence("BUY", _structure("uptrend"), _bos("bos_up"), _ind(70, 1.1, 1.0), _pattern("bullish", 1.0))
    assert res.score == 91.0
    assert (res.side, res.label) == ("buy", "Strong Buy")
    assert len(res.reasons) == 6
    assert res.reasons[0].startswith("Fast SMA above")


def test_score_clamped_to_range():
    hi = build_confluence("BUY", _structure("uptrend"), _bos("bos_up"), _ind(70, 1.1, 1.0), _pattern("bullish", 9.0))
    lo = build_confluence("SELL", _structure("downtrend"), _bos("bos_down"), _ind(30, 0.9, 1.0), _pattern("bearish", 9.0))
    assert hi.score == 100.0
    assert lo.score == 0.0


def test_strong_label_follows_sell_trend_signal():
    res = build_confluence("SELL", _structure("uptrend"), _bos("bos_up"), _ind(70, 1.1, 1.0), _pattern("bullish", 2.0))
    assert res.score == 85.0
    assert (res.side, res.label) == ("sell", "Strong Sell")


def test_weak_buy_with_unavailable_indicators():
    res = build_confluence("BUY", _structure("uptrend"), _bos("none"), _ind(rsi=None, mid=None), _pattern())
    assert res.score == 68.0
    assert (res.side, res.label) == ("buy", "Weak Buy")
    assert any("RSI unavailable" in r for r in res.reasons)
    assert any("Bollinger Bands unavailable" in r for r in res.reasons)


def test_balanced_inputs_are_neutral():
    res = build_confluence("WAIT", _structure("sideways"), _bos("none"), _ind(), _pattern())
    assert res.score == 50.0
    assert res.side == "neutral"
    assert res.coaching


def test_weak_setup_fades_the_trend_signal():
    sell = build_confluence("SELL", _structure("downtrend"), _bos("bos_down"), _ind(30, 0.9, 1.0), _pattern("bearish", 0.8))
    assert sell.score == 11.0
    assert sell.side == "buy"
    assert sell.label.startswith("Weak setup")

    buy = build_confluence("BUY", _structure("downtrend"), _bos("bos_down"), _ind(30, 0.9, 1.0), _pattern("bearish", 0.8))
    assert buy.side == "sell"

    wait = build_confluence("WAIT", _structure("downtrend"), _bos("bos_down"), _ind(), _pattern())
    assert wait.score == 33.0
    assert wait.side == "sell"


def test_reason_order_is_fixed():
    res = build_confluence("BUY", _structure("uptrend"), _bos("bos_up"), _ind(70, 1.1, 1.0), _pattern("bullish", 0.6))
    keys = ["SMA", "uptrend", "Break of structure", "RSI", "BB", "candlestick"]
    assert [k in r for k, r in zip(keys, res.reasons)] == [True] * 6
