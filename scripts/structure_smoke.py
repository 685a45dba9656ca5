from __future__ import annotations

import math

from fx_coach.analyzer import MarketAnalyzer
from fx_coach.models import Candle


def candle(idx: int, open_p: float, high: float, low: float, close: float) -> Candle:
    return Candle(time_ms=idx * 60_000, open=open_p, high=high, low=low, close=close)


def wave(n: int, drift: float):
    """Sine wave with drift so swings form a staircase."""
    out = []
    prev = 1.1000
    for i in range(n):
        close = 1.1000 + drift * i + 0.0020 * math.sin(i / 2.0)
        out.append(candle(i, prev, max(prev, close) + 0.0003, min(prev, close) - 0.0003, close))
        prev = close
    return out


def run_case(name: str, analyzer: MarketAnalyzer, candles):
    a = analyzer.analyze(candles)
    labels = [p.label for p in a.structure.points]
    print(f"{name}: signal={a.trend_signal} trend={a.structure.trend} bos={a.bos.status} "
          f"pattern={a.pattern.name} score={a.confluence.score} side={a.confluence.side} labels={labels[-8:]}")


def main():
    classic = MarketAnalyzer()
    scalp = MarketAnalyzer(fast_length=5, slow_length=20, snr_strategy="cluster")

    run_case("uptrend_classic", classic, wave(120, 0.0004))
    run_case("downtrend_classic", classic, wave(120, -0.0004))
    run_case("range_scalp", scalp, wave(120, 0.0))
    run_case("empty", classic, [])

    levels = scalp.analyze(wave(120, 0.0)).snr
    print("cluster_snr", [(lvl.type, lvl.price, lvl.touches) for lvl in levels])


if __name__ == "__main__":
    main()
