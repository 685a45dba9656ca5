from __future__ import annotations

from typing import Sequence

from .models import Candle, PatternResult

DOJI_BODY_RATIO = 0.15
ENGULF_BODY_MULT = 1.2
PIN_WICK_MULT = 1.5
PIN_OPPOSITE_WICK_MAX = 0.5

ENGULF_CONF_WITH_CONTEXT = 0.8
ENGULF_CONF = 0.65
PIN_CONF = 0.6
DOJI_CONF = 0.3
NO_PATTERN_CONF = 0.1

_INSUFFICIENT = PatternResult(
    name="No strong pattern",
    direction="neutral",
    confidence=0.0,
    note="Not enough candles yet to read a candlestick pattern for practice entries.",
)


def _body(c: Candle) -> float:
    return abs(c.close - c.open)


def _upper_wick(c: Candle) -> float:
    return c.high - max(c.open, c.close)


def _lower_wick(c: Candle) -> float:
    return min(c.open, c.close) - c.low


def detect_candle_pattern(candles: Sequence[Candle]) -> PatternResult:
    """Classify the last candle (with the two before it as context).

    Checks run in a fixed order and the first match wins:
    doji, bullish engulfing, bearish engulfing, bullish pin bar, bearish pin bar.
    """
    if len(candles) < 3:
        return _INSUFFICIENT

    c1, c2, c3 = candles[-3], candles[-2], candles[-1]
    body = _body(c3)
    prev_body = _body(c2)
    rng = c3.high - c3.low

    if rng > 0 and body < rng * DOJI_BODY_RATIO:
        return PatternResult(
            name="Doji",
            direction="neutral",
            confidence=DOJI_CONF,
            note="Doji: buyers and sellers are balanced. Practice: treat it as indecision "
                 "and wait for the next candle to pick a side.",
        )

    bull_now = c3.close > c3.open
    bear_now = c3.close < c3.open
    bull_prev = c2.close > c2.open
    bear_prev = c2.close < c2.open

    if bear_prev and bull_now and c3.open <= c2.close and c3.close >= c2.open and body >= prev_body * ENGULF_BODY_MULT:
        # prior leg down gives the reversal context
        with_context = c1.close > c2.close
        return PatternResult(
            name="Bullish Engulfing",
            direction="bullish",
            confidence=ENGULF_CONF_WITH_CONTEXT if with_context else ENGULF_CONF,
            note="Bullish engulfing at the end of a decline: potential reversal up. Practice: "
                 "wait for confirmation on the next candle and check the position against SNR.",
        )

    if bull_prev and bear_now and c3.open >= c2.close and c3.close <= c2.open and body >= prev_body * ENGULF_BODY_MULT:
        with_context = c1.close < c2.close
        return PatternResult(
            name="Bearish Engulfing",
            direction="bearish",
            confidence=ENGULF_CONF_WITH_CONTEXT if with_context else ENGULF_CONF,
            note="Bearish engulfing at the end of a rally: potential reversal down. Practice: "
                 "watch the reaction at SNR or the premium zone before any entry.",
        )

    lower = _lower_wick(c3)
    upper = _upper_wick(c3)

    if lower > body * PIN_WICK_MULT and upper < body * PIN_OPPOSITE_WICK_MAX:
        return PatternResult(
            name="Bullish Pin Bar / Hammer",
            direction="bullish",
            confidence=PIN_CONF,
            note="Bullish pin bar (long lower wick): price rejected from below. Practice: use it "
                 "as BUY confirmation near support/SNR, not in the middle of a range.",
        )

    if upper > body * PIN_WICK_MULT and lower < body * PIN_OPPOSITE_WICK_MAX:
        return PatternResult(
            name="Bearish Pin Bar / Shooting Star",
            direction="bearish",
            confidence=PIN_CONF,
            note="Bearish pin bar (long upper wick): price rejected from above. Practice: treat it "
                 "as a SELL signal near resistance/SNR, avoid selling into support.",
        )

    return PatternResult(
        name="No strong pattern",
        direction="neutral",
        confidence=NO_PATTERN_CONF,
        note="No clear engulfing, pin bar or doji. Practice: focus on structure "
             "(trend, BOS, SNR) before relying on candlesticks.",
    )
