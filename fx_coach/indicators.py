from __future__ import annotations
from typing import List, Optional, Sequence
import math

from .models import BollingerBands, Candle


def sma(values: Sequence[float], length: int) -> Optional[float]:
    if length <= 0 or len(values) < length:
        return None
    return sum(values[-length:]) / float(length)


def rsi(closes: Sequence[float], length: int = 14) -> Optional[float]:
    """Simple-average RSI over the last `length` one-step changes.

    Gains and losses are collected in separate lists (a zero change counts as a
    gain), so the two trailing windows may reach different distances back.
    A zero average loss is reported as a neutral 50.0.
    """
    if length <= 0 or len(closes) < length + 1:
        return None
    gains: List[float] = []
    losses: List[float] = []
    for prev, cur in zip(closes[:-1], closes[1:]):
        ch = cur - prev
        if ch >= 0:
            gains.append(ch)
        else:
            losses.append(-ch)
    avg_gain = sum(gains[-length:]) / float(length)
    avg_loss = sum(losses[-length:]) / float(length)
    if avg_loss == 0:
        return 50.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def true_range(high: float, low: float, prev_close: float) -> float:
    return max(high - low, abs(high - prev_close), abs(low - prev_close))


def atr(candles: Sequence[Candle], length: int = 14) -> Optional[float]:
    if length <= 0 or len(candles) < length + 1:
        return None
    trs = []
    for i in range(-length, 0):
        c = candles[i]
        trs.append(true_range(c.high, c.low, candles[i - 1].close))
    return sum(trs) / float(length)


def bollinger(values: Sequence[float], length: int = 20, mult: float = 2.0) -> Optional[BollingerBands]:
    if length <= 0 or len(values) < length:
        return None
    window = values[-length:]
    mean = sum(window) / float(length)
    variance = sum((v - mean) ** 2 for v in window) / float(length)
    sd = math.sqrt(variance)
    return BollingerBands(middle=mean, upper=mean + mult * sd, lower=mean - mult * sd)


def trend_signal(sma_fast: Optional[float], sma_slow: Optional[float]) -> str:
    if sma_fast is None or sma_slow is None:
        return "WAIT"
    if sma_fast > sma_slow:
        return "BUY"
    if sma_fast < sma_slow:
        return "SELL"
    return "WAIT"
