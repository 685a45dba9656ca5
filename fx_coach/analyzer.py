from __future__ import annotations

import logging
from typing import Optional, Sequence

from .config import AnalysisConfig
from .confluence import build_confluence
from .indicators import atr, bollinger, rsi, sma, trend_signal
from .models import Analysis, Candle, ConfluenceResult, Indicators
from .patterns import detect_candle_pattern
from .structure import SNR_STRATEGIES, build_snr, detect_bos, detect_market_structure

log = logging.getLogger("analyzer")


class MarketAnalyzer:
    """Stateless indicator + market-structure pipeline for one candle sequence."""

    def __init__(
        self,
        *,
        fast_length: int = 7,
        slow_length: int = 25,
        rsi_length: int = 14,
        atr_length: int = 14,
        bb_length: int = 20,
        bb_mult: float = 2.0,
        structure_sensitivity: int = 2,
        snr_strategy: str = "label",
    ):
        if snr_strategy not in SNR_STRATEGIES:
            raise ValueError(f"Unsupported snr_strategy: {snr_strategy} (use one of {', '.join(SNR_STRATEGIES)})")
        if structure_sensitivity <= 0:
            raise ValueError("structure_sensitivity must be positive")

        self.fast_length = fast_length
        self.slow_length = slow_length
        self.rsi_length = rsi_length
        self.atr_length = atr_length
        self.bb_length = bb_length
        self.bb_mult = bb_mult
        self.structure_sensitivity = structure_sensitivity
        self.snr_strategy = snr_strategy

    @classmethod
    def from_config(cls, cfg: AnalysisConfig) -> "MarketAnalyzer":
        return cls(**cfg.signature())

    def analyze(self, candles: Optional[Sequence[Candle]]) -> Analysis:
        if not candles:
            return self._not_enough_data()

        closes = [c.close for c in candles]
        sma_fast = sma(closes, self.fast_length)
        sma_slow = sma(closes, self.slow_length)
        indicators = Indicators(
            sma_fast=sma_fast,
            sma_slow=sma_slow,
            rsi=rsi(closes, self.rsi_length),
            atr=atr(candles, self.atr_length),
            bb=bollinger(closes, self.bb_length, self.bb_mult),
            price=closes[-1],
        )
        signal = trend_signal(sma_fast, sma_slow)

        structure = detect_market_structure(candles, self.structure_sensitivity)
        snr = build_snr(structure, self.snr_strategy)
        bos = detect_bos(structure)
        pattern = detect_candle_pattern(candles)
        confluence = build_confluence(signal, structure, bos, indicators, pattern)

        log.debug(
            "analysis candles=%d signal=%s trend=%s bos=%s pattern=%s score=%.1f side=%s",
            len(candles),
            signal,
            structure.trend,
            bos.status,
            pattern.name,
            confluence.score,
            confluence.side,
        )

        return Analysis(
            status="ok",
            trend_signal=signal,
            indicators=indicators,
            structure=structure,
            snr_strategy=self.snr_strategy,
            snr=snr,
            bos=bos,
            pattern=pattern,
            confluence=confluence,
            last_price=closes[-1],
            last_time_ms=candles[-1].time_ms,
        )

    def _not_enough_data(self) -> Analysis:
        structure = detect_market_structure([], self.structure_sensitivity)
        return Analysis(
            status="not_enough_data",
            trend_signal="WAIT",
            indicators=Indicators(sma_fast=None, sma_slow=None, rsi=None, atr=None, bb=None, price=None),
            structure=structure,
            snr_strategy=self.snr_strategy,
            snr=[],
            bos=detect_bos(structure),
            pattern=detect_candle_pattern([]),
            confluence=ConfluenceResult(
                score=50.0,
                side="neutral",
                label="Not enough data",
                reasons=["No candle data available to score a setup."],
                coaching="Wait for price data before reading the market.",
            ),
        )
