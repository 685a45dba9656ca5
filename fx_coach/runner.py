from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional, Tuple

from .analyzer import MarketAnalyzer
from .commentary.openai_chat import OpenAICommentator
from .config import Config
from .formatters import analysis_to_dict, format_summary
from .profiles import assert_profile_inputs, log_analysis_signature
from .providers.twelvedata import TwelveDataProvider, normalize_interval, normalize_pair

log = logging.getLogger("runner")


class CoachRunner:
    """Wires the candle source, the analysis core and the AI commentator together."""

    def __init__(self, cfg: Config, *, provider=None, commentator=None):
        self.cfg = cfg
        if cfg.analysis.profile_strict:
            assert_profile_inputs(cfg.analysis)
        self.analyzer = MarketAnalyzer.from_config(cfg.analysis)
        self.provider = provider or TwelveDataProvider(
            cfg.provider.api_key,
            base_url=cfg.provider.base_url,
            rest_timeout_s=cfg.provider.rest_timeout_s,
            rest_max_retries=cfg.provider.rest_max_retries,
            rest_backoff_s=cfg.provider.rest_backoff_s,
        )
        if commentator is None:
            commentator = OpenAICommentator(
                cfg.commentary.api_key if cfg.commentary.enabled else "",
                base_url=cfg.commentary.base_url,
                model=cfg.commentary.model,
                temperature=cfg.commentary.temperature,
                timeout_s=cfg.commentary.timeout_s,
            )
        self.commentator = commentator

    def startup_log(self) -> None:
        log_analysis_signature(self.cfg.analysis)
        if not self.provider.enabled():
            log.warning("provider_disabled reason=no_api_key env=TWELVEDATA_KEY")
        if not self.commentator.enabled():
            log.info("commentary_disabled")

    def resolve(self, pair: Optional[str], tf: Optional[str]) -> Tuple[str, str]:
        pair_code = normalize_pair(pair or self.cfg.provider.default_pair, self.cfg.provider.pairs)
        interval = normalize_interval(tf or self.cfg.provider.default_interval, self.cfg.provider.intervals)
        return pair_code, interval

    async def signal(self, pair: Optional[str], tf: Optional[str]) -> Optional[Dict[str, Any]]:
        """Fetch candles and analyze them. Returns None when the source has no candles."""
        pair_code, interval = self.resolve(pair, tf)
        candles = await self.provider.fetch_candles(pair_code, interval, self.cfg.provider.outputsize)
        if not candles:
            log.warning("no_candles pair=%s tf=%s", pair_code, interval)
            return None

        t0 = time.perf_counter()
        analysis = self.analyzer.analyze(candles)
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        log.info(
            "signal pair=%s tf=%s candles=%d signal=%s score=%.1f side=%s elapsed_ms=%.2f",
            pair_code,
            interval,
            len(candles),
            analysis.trend_signal,
            analysis.confluence.score,
            analysis.confluence.side,
            elapsed_ms,
        )
        return analysis_to_dict(analysis, pair=pair_code, timeframe=interval, candles=candles)

    async def ai_insight(self, payload: Dict[str, Any]) -> str:
        summary = format_summary(payload or {})
        return await self.commentator.comment(summary)

    async def close(self) -> None:
        await self.provider.close()
