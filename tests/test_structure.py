import math

import pytest

from fx_coach.models import Candle, LabeledPoint, MarketStructure, SwingPoint
from fx_coach.structure import (
    build_snr,
    classify_trend,
    detect_bos,
    detect_market_structure,
    detect_swings,
    label_swings,
)


def _c(idx: int, o: float, h: float, l: float, c: float) -> Candle:
    return Candle(time_ms=idx * 60_000, open=o, high=h, low=l, close=c)


def _hl(idx: int, high: float, low: float) -> Candle:
    mid = (high + low) / 2.0
    return _c(idx, mid, high, low, mid)


def _sp(idx: int, kind: str, price: float) -> SwingPoint:
    return SwingPoint(type=kind, index=idx, time_ms=idx * 60_000, price=price)


def _lp(idx: int, label: str) -> LabeledPoint:
    kind = "swing_high" if label.endswith("H") else "swing_low"
    return LabeledPoint(type=kind, index=idx, time_ms=idx, price=1.0, label=label)


def _noisy_candles(n: int = 60):
    out = []
    prev = 100.0
    for i in range(n):
        close = 100.0 + 3.0 * math.sin(i / 2.0) + 2.0 * math.sin(i / 5.0) + 0.05 * i
        # the per-index drift keeps neighbouring highs/lows distinct so no swing prices tie
        high = max(prev, close) + 0.4 + 0.0007 * i
        low = min(prev, close) - 0.3 - 0.0007 * i
        out.append(_c(i, prev, high, low, close))
        prev = close
    return out


def _mirror(candles):
    return [_c(i, -c.open, -c.low, -c.high, -c.close) for i, c in enumerate(candles)]


def test_detect_swings_sensitivity_one():
    highs = [1, 3, 2, 5, 4]
    lows = [0, 2, 1, 4, 3]
    candles = [_hl(i, h, l) for i, (h, l) in enumerate(zip(highs, lows))]
    swings = detect_swings(candles, 1)
    assert [(s.index, s.type) for s in swings] == [(1, "swing_high"), (2, "swing_low"), (3, "swing_high")]
    assert [p.label for p in label_swings(swings)] == ["H", "L", "HH"]


def test_detect_swings_compares_only_candles_at_offset():
    # candle 2 is below candle 1 but above candles 0 and 4
    highs = [1, 10, 5, 9, 2, 0, 0]
    candles = [_hl(i, h, h - 0.5) for i, h in enumerate(highs)]
    swings = [s for s in detect_swings(candles, 2) if s.type == "swing_high"]
    assert [s.index for s in swings] == [2]


def test_candle_can_be_both_swing_high_and_low():
    candles = [_hl(0, 5, 4), _hl(1, 10, 1), _hl(2, 5, 4)]
    swings = detect_swings(candles, 1)
    assert [s.type for s in swings] == ["swing_high", "swing_low"]


def test_labels_compare_same_polarity_only():
    highs_only = label_swings([_sp(1, "swing_high", 100), _sp(5, "swing_high", 110), _sp(9, "swing_high", 105)])
    mixed = label_swings([
        _sp(1, "swing_high", 100),
        _sp(3, "swing_low", 200),
        _sp(5, "swing_high", 110),
        _sp(7, "swing_low", 50),
        _sp(9, "swing_high", 105),
    ])
    assert [p.label for p in highs_only] == ["H", "HH", "LH"]
    assert [p.label for p in mixed if p.type == "swing_high"] == ["H", "HH", "LH"]
    assert [p.label for p in mixed if p.type == "swing_low"] == ["L", "LL"]


def test_equal_prices_label_as_lower():
    pts = label_swings([_sp(1, "swing_high", 100), _sp(3, "swing_high", 100)])
    assert pts[-1].label == "LH"
    pts = label_swings([_sp(1, "swing_low", 100), _sp(3, "swing_low", 100)])
    assert pts[-1].label == "LL"


def test_mirrored_series_mirrors_labels():
    flip = {"H": "L", "L": "H", "HH": "LL", "LL": "HH", "LH": "HL", "HL": "LH"}
    kinds = {"swing_high": "swing_low", "swing_low": "swing_high"}
    candles = _noisy_candles()
    orig = detect_market_structure(candles, 2).points
    mirrored = detect_market_structure(_mirror(candles), 2).points
    assert orig
    assert {(p.index, kinds[p.type], flip[p.label]) for p in orig} == {(p.index, p.type, p.label) for p in mirrored}


def test_tied_swings_do_not_mirror():
    highs = [1, 5, 1, 5, 1]
    lows = [0.5, 4, 0.5, 4, 0.5]
    candles = [_hl(i, h, l) for i, (h, l) in enumerate(zip(highs, lows))]
    orig = label_swings(detect_swings(candles, 1))
    mirrored = label_swings(detect_swings(_mirror(candles), 1))
    assert [(p.index, p.label) for p in orig if p.type == "swing_high"] == [(1, "H"), (3, "LH")]
    # equal lows in the mirror read as LL, not the HL a symmetric rule would give
    assert [(p.index, p.label) for p in mirrored if p.type == "swing_low"] == [(1, "L"), (3, "LL")]


def test_classify_trend_uses_last_eight_points():
    assert classify_trend([_lp(i, x) for i, x in enumerate(["HH", "HL", "HH", "HL"])]) == "uptrend"
    assert classify_trend([_lp(i, x) for i, x in enumerate(["LH", "LL", "LH", "LL", "HH"])]) == "downtrend"
    assert classify_trend([_lp(i, x) for i, x in enumerate(["HH", "HL", "HH"])]) == "sideways"
    # only four of the LLs stay inside the window: 4 up vs 4 down
    labels = ["LL"] * 5 + ["HH", "HL", "HH", "HL"]
    assert classify_trend([_lp(i, x) for i, x in enumerate(labels)]) == "sideways"


def test_market_structure_minimum_data_guard():
    candles = [_hl(i, 2 + i % 3, 1) for i in range(8)]
    ms = detect_market_structure(candles, 2)
    assert ms.trend == "unknown"
    assert ms.bias == "neutral"
    assert ms.points == [] and ms.swings == []
    assert ms.comment


def test_market_structure_bias_follows_trend():
    ms = detect_market_structure(_noisy_candles(), 2)
    expected = {"uptrend": "buy_bias", "downtrend": "sell_bias", "sideways": "neutral"}
    assert ms.bias == expected[ms.trend]


@pytest.mark.parametrize("label", ["H", "L", "HL", "LH"])
def test_bos_none_unless_hh_or_ll(label):
    bos = detect_bos(MarketStructure(trend="sideways", bias="neutral", points=[_lp(3, label)]))
    assert bos.status == "none"
    assert bos.label == label


def test_bos_up_and_down():
    up = detect_bos(MarketStructure(trend="uptrend", bias="buy_bias", points=[_lp(1, "L"), _lp(2, "HH")]))
    down = detect_bos(MarketStructure(trend="downtrend", bias="sell_bias", points=[_lp(1, "H"), _lp(2, "LL")]))
    assert (up.status, up.direction) == ("bos_up", "up")
    assert (down.status, down.direction) == ("bos_down", "down")


def test_bos_without_points_is_not_enough_data():
    bos = detect_bos(MarketStructure(trend="unknown", bias="neutral"))
    assert bos.status == "none"
    assert bos.direction is None and bos.label is None and bos.price is None and bos.time_ms is None
    assert bos.note


def test_label_snr_takes_last_six_points():
    points = [_lp(i, "HH" if i % 2 else "HL") for i in range(9)]
    snr = build_snr(MarketStructure(trend="uptrend", bias="buy_bias", points=points), "label")
    assert len(snr) == 6
    assert [lvl.time_ms for lvl in snr] == [p.time_ms for p in points[-6:]]
    assert [lvl.type for lvl in snr] == [p.label for p in points[-6:]]


def test_cluster_snr_groups_rounded_prices():
    swings = [
        _sp(1, "swing_high", 1.3),
        _sp(2, "swing_high", 1.23451),
        _sp(3, "swing_high", 1.23449),
    ] + [_sp(10 + i, "swing_low", 1.1 + i * 0.01) for i in range(7)]
    snr = build_snr(MarketStructure(trend="sideways", bias="neutral", swings=swings), "cluster")
    resistance = [lvl for lvl in snr if lvl.type == "resistance"]
    support = [lvl for lvl in snr if lvl.type == "support"]
    assert [(lvl.price, lvl.touches) for lvl in resistance] == [(1.2345, 2), (1.3, 1)]
    assert len(support) == 5


def test_unknown_snr_strategy_rejected():
    with pytest.raises(ValueError):
        build_snr(MarketStructure(trend="sideways", bias="neutral"), "blend")
