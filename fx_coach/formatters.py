from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence

from .models import Analysis, Candle


def _fmt_ms(ts_ms: Optional[int], tz=timezone.utc) -> Optional[str]:
    if ts_ms is None:
        return None
    dt = datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc).astimezone(tz)
    return dt.strftime("%Y-%m-%d %H:%M")


def _fmt_val(val: Any) -> str:
    if val is None:
        return "-"
    if isinstance(val, float):
        return repr(val)
    return str(val)


def analysis_to_dict(
    analysis: Analysis,
    *,
    pair: str,
    timeframe: str,
    candles: Optional[Sequence[Candle]] = None,
) -> Dict[str, Any]:
    """JSON-ready payload for the dashboard and the AI summary round-trip."""
    out: Dict[str, Any] = {
        "pair": pair,
        "timeframe": timeframe,
        "status": analysis.status,
        "last_price": analysis.last_price,
        "last_time_ms": analysis.last_time_ms,
        "last_time": _fmt_ms(analysis.last_time_ms),
        "signal": analysis.trend_signal,
        "indicators": asdict(analysis.indicators),
        "structure": asdict(analysis.structure),
        "snr_strategy": analysis.snr_strategy,
        "snr": [asdict(x) for x in analysis.snr],
        "bos": asdict(analysis.bos),
        "pattern": asdict(analysis.pattern),
        "confluence": asdict(analysis.confluence),
    }
    if candles is not None:
        out["candles"] = [asdict(c) for c in candles]
    return out


def format_summary(payload: Dict[str, Any]) -> str:
    """Plain-text prompt summary from an `analysis_to_dict` payload (or a partial one)."""
    indicators = payload.get("indicators") or {}
    bb = indicators.get("bb") or {}
    structure = payload.get("structure") or {}
    bos = payload.get("bos") or {}
    pattern = payload.get("pattern") or {}
    confluence = payload.get("confluence") or {}

    lines = [
        f"Pair: {payload.get('pair') or 'EUR/USD'}, Timeframe: {payload.get('timeframe') or '1min'}",
        f"Main indicator signal: {_fmt_val(payload.get('signal'))}",
        f"RSI: {_fmt_val(indicators.get('rsi'))}, ATR: {_fmt_val(indicators.get('atr'))}, "
        f"Fast SMA: {_fmt_val(indicators.get('sma_fast'))}, Slow SMA: {_fmt_val(indicators.get('sma_slow'))}",
        f"Bollinger mid: {_fmt_val(bb.get('middle'))}, upper: {_fmt_val(bb.get('upper'))}, "
        f"lower: {_fmt_val(bb.get('lower'))}",
        "",
        "Market structure:",
        f"- Trend: {_fmt_val(structure.get('trend'))}",
        f"- Bias: {_fmt_val(structure.get('bias'))}",
        f"- Structure comment: {_fmt_val(structure.get('comment'))}",
        "",
        "Break of Structure (BOS):",
        f"- Status: {_fmt_val(bos.get('status'))}",
        f"- Direction: {_fmt_val(bos.get('direction'))}",
        f"- Note: {_fmt_val(bos.get('note'))}",
        "",
        "Candlestick pattern:",
        f"- Name: {_fmt_val(pattern.get('name'))}",
        f"- Direction: {_fmt_val(pattern.get('direction'))}",
        f"- Confidence: {_fmt_val(pattern.get('confidence'))}",
        f"- Note: {_fmt_val(pattern.get('note'))}",
        "",
        "Confluence engine:",
        f"- Score: {_fmt_val(confluence.get('score'))}",
        f"- Label: {_fmt_val(confluence.get('label'))}",
        f"- Side: {_fmt_val(confluence.get('side'))}",
        f"- Coaching: {_fmt_val(confluence.get('coaching'))}",
    ]
    return "\n".join(lines)
