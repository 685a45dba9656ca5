import json

from fx_coach.analyzer import MarketAnalyzer
from fx_coach.formatters import analysis_to_dict, format_summary
from fx_coach.models import Candle


def _c(idx: int, o: float, h: float, l: float, c: float) -> Candle:
    return Candle(time_ms=idx * 60_000, open=o, high=h, low=l, close=c)


def _candles(n: int = 40):
    out = []
    for i in range(n):
        base = 1.10 + 0.002 * (i % 4 in (1, 2)) + 0.0001 * i
        out.append(_c(i, base, base + 0.0005, base - 0.0005, base + 0.0001))
    return out


def test_analysis_to_dict_is_json_ready():
    candles = _candles()
    payload = analysis_to_dict(MarketAnalyzer().analyze(candles), pair="EUR/USD", timeframe="1min", candles=candles)
    assert payload["pair"] == "EUR/USD"
    assert payload["signal"] in ("BUY", "SELL", "WAIT")
    assert payload["last_time"] == "1970-01-01 00:39"
    assert len(payload["candles"]) == len(candles)
    assert set(payload["confluence"]) == {"score", "side", "label", "reasons", "coaching"}
    assert set(payload["indicators"]["bb"]) == {"middle", "upper", "lower"}
    json.dumps(payload)


def test_analysis_to_dict_without_candles():
    payload = analysis_to_dict(MarketAnalyzer().analyze([]), pair="EUR/USD", timeframe="1min")
    assert "candles" not in payload
    assert payload["status"] == "not_enough_data"
    assert payload["indicators"]["bb"] is None
    assert payload["last_time"] is None


def test_summary_round_trip_from_payload():
    candles = _candles()
    payload = analysis_to_dict(MarketAnalyzer().analyze(candles), pair="GBP/USD", timeframe="5min")
    text = format_summary(json.loads(json.dumps(payload)))
    assert "Pair: GBP/USD, Timeframe: 5min" in text
    assert f"- Trend: {payload['structure']['trend']}" in text
    assert f"- Score: {payload['confluence']['score']!r}" in text


def test_summary_tolerates_empty_payload():
    text = format_summary({})
    assert "Pair: EUR/USD, Timeframe: 1min" in text
    assert "RSI: -" in text
    assert "Bollinger mid: -" in text


def test_summary_keeps_full_price_precision():
    payload = {
        "pair": "USD/JPY",
        "indicators": {"rsi": 61.25, "atr": 0.01234567, "sma_fast": 151.2345, "sma_slow": 151.23456789, "bb": None},
        "confluence": {"score": 72.0},
    }
    text = format_summary(payload)
    assert "Fast SMA: 151.2345, Slow SMA: 151.23456789" in text
    assert "ATR: 0.01234567" in text
    assert "- Score: 72.0" in text
    assert "Bollinger mid: -" in text
