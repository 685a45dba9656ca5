from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence, Tuple

from .models import BosEvent, Candle, LabeledPoint, MarketStructure, SnrLevel, SwingPoint

SNR_STRATEGIES = ("label", "cluster")

TREND_LOOKBACK_POINTS = 8
TREND_MIN_VOTES = 4
SNR_LABEL_POINTS = 6
SNR_CLUSTER_DECIMALS = 4
SNR_CLUSTER_TOP = 5

_NOT_ENOUGH_COMMENT = "Not enough candles yet to read market structure."

# trend -> (bias, comment)
_TREND_BIAS: Dict[str, Tuple[str, str]] = {
    "uptrend": (
        "buy_bias",
        "Structure is dominated by HH and HL (uptrend). Practice: look for BUY setups after a "
        "pullback into support/SNR, do not chase SELLs against the trend.",
    ),
    "downtrend": (
        "sell_bias",
        "Structure is dominated by LH and LL (downtrend). Practice: look for SELL setups at "
        "resistance or weak pullbacks, avoid BUYs against the flow.",
    ),
    "sideways": (
        "neutral",
        "Structure is mostly sideways. Practice: watch the top and bottom of the range, "
        "do not enter aggressively in the middle.",
    ),
}


def detect_swings(candles: Sequence[Candle], sensitivity: int = 2) -> List[SwingPoint]:
    """Swing highs/lows compared against the candles exactly `sensitivity` bars away."""
    s = sensitivity
    swings: List[SwingPoint] = []
    for i in range(s, len(candles) - s):
        c = candles[i]
        left = candles[i - s]
        right = candles[i + s]
        if c.high > left.high and c.high > right.high:
            swings.append(SwingPoint(type="swing_high", index=i, time_ms=c.time_ms, price=float(c.high)))
        if c.low < left.low and c.low < right.low:
            swings.append(SwingPoint(type="swing_low", index=i, time_ms=c.time_ms, price=float(c.low)))
    return swings


def label_swings(swings: Sequence[SwingPoint]) -> List[LabeledPoint]:
    points: List[LabeledPoint] = []
    last_high: Optional[SwingPoint] = None
    last_low: Optional[SwingPoint] = None
    for s in swings:
        if s.type == "swing_high":
            if last_high is None:
                label = "H"
            else:
                label = "HH" if s.price > last_high.price else "LH"
            last_high = s
        else:
            if last_low is None:
                label = "L"
            else:
                label = "HL" if s.price > last_low.price else "LL"
            last_low = s
        points.append(LabeledPoint(type=s.type, index=s.index, time_ms=s.time_ms, price=s.price, label=label))
    return points


def classify_trend(points: Sequence[LabeledPoint]) -> str:
    recent = [p.label for p in points[-TREND_LOOKBACK_POINTS:]]
    up = recent.count("HH") + recent.count("HL")
    down = recent.count("LH") + recent.count("LL")
    if up >= TREND_MIN_VOTES and up > down:
        return "uptrend"
    if down >= TREND_MIN_VOTES and down > up:
        return "downtrend"
    return "sideways"


def detect_market_structure(candles: Sequence[Candle], sensitivity: int = 2) -> MarketStructure:
    if len(candles) < sensitivity * 2 + 5:
        return MarketStructure(trend="unknown", bias="neutral", points=[], swings=[], comment=_NOT_ENOUGH_COMMENT)

    swings = detect_swings(candles, sensitivity)
    points = label_swings(swings)
    trend = classify_trend(points)
    bias, comment = _TREND_BIAS[trend]
    return MarketStructure(trend=trend, bias=bias, points=points, swings=swings, comment=comment)


def _snr_from_labels(structure: MarketStructure) -> List[SnrLevel]:
    return [
        SnrLevel(type=p.label, price=float(p.price), time_ms=p.time_ms)
        for p in structure.points[-SNR_LABEL_POINTS:]
    ]


def _cluster(prices: List[float], kind: str) -> List[SnrLevel]:
    counts = Counter(round(p, SNR_CLUSTER_DECIMALS) for p in prices)
    # most_common keeps first-seen order for equal counts
    return [SnrLevel(type=kind, price=price, touches=n) for price, n in counts.most_common(SNR_CLUSTER_TOP)]


def _snr_from_clusters(structure: MarketStructure) -> List[SnrLevel]:
    highs = [s.price for s in structure.swings if s.type == "swing_high"]
    lows = [s.price for s in structure.swings if s.type == "swing_low"]
    return _cluster(highs, "resistance") + _cluster(lows, "support")


def build_snr(structure: MarketStructure, strategy: str = "label") -> List[SnrLevel]:
    if strategy == "label":
        return _snr_from_labels(structure)
    if strategy == "cluster":
        return _snr_from_clusters(structure)
    raise ValueError(f"Unsupported snr_strategy: {strategy} (use one of {', '.join(SNR_STRATEGIES)})")


def detect_bos(structure: MarketStructure) -> BosEvent:
    if not structure.points:
        return BosEvent(
            status="none",
            direction=None,
            label=None,
            price=None,
            time_ms=None,
            note="No significant swing yet to read a break of structure.",
        )

    last = structure.points[-1]
    if last.label == "HH":
        return BosEvent(
            status="bos_up",
            direction="up",
            label=last.label,
            price=float(last.price),
            time_ms=last.time_ms,
            note="Price printed a new Higher High: bullish break of structure. "
                 "Practice: watch for BUY opportunities after a normal pullback.",
        )
    if last.label == "LL":
        return BosEvent(
            status="bos_down",
            direction="down",
            label=last.label,
            price=float(last.price),
            time_ms=last.time_ms,
            note="Price printed a new Lower Low: bearish break of structure. "
                 "Practice: watch for SELL opportunities after a weak pullback.",
        )
    return BosEvent(
        status="none",
        direction="none",
        label=last.label,
        price=float(last.price),
        time_ms=last.time_ms,
        note="Last swing is not HH or LL. No clear BOS yet, wait for the next structure.",
    )
