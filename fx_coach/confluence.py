from __future__ import annotations

from typing import List, Tuple

from .models import BosEvent, ConfluenceResult, Indicators, MarketStructure, PatternResult

_COACHING = {
    "buy": "Use this as practice for BUYs in the direction of the trend; prefer entries after a "
           "pullback into clear SNR or support.",
    "sell": "Use this as practice for SELLs in the direction of the trend; watch resistance or the "
            "premium zone before entering.",
    "neutral": "Use this moment to observe structure without entering. Practice: mark SNR and wait "
               "for stronger confluence.",
}


def _side_and_label(score: float, trend_signal: str) -> Tuple[str, str]:
    is_sell = trend_signal == "SELL"
    if score >= 80:
        return ("sell", "Strong Sell") if is_sell else ("buy", "Strong Buy")
    if score >= 60:
        return ("sell", "Weak Sell") if is_sell else ("buy", "Weak Buy")
    if score > 40:
        return "neutral", "Neutral / balanced"
    # Low score fades the MA signal; WAIT fades to sell.
    alt = "buy" if is_sell else "sell"
    return alt, "Weak setup (avoid aggressive entry)"


def build_confluence(
    trend_signal: str,
    structure: MarketStructure,
    bos: BosEvent,
    indicators: Indicators,
    pattern: PatternResult,
) -> ConfluenceResult:
    score = 50.0
    reasons: List[str] = []

    if trend_signal == "BUY":
        score += 8
        reasons.append("Fast SMA above slow SMA: BUY bias (+8).")
    elif trend_signal == "SELL":
        score -= 8
        reasons.append("Fast SMA below slow SMA: SELL bias (-8).")
    else:
        reasons.append("SMA direction unclear: WAIT (+0).")

    if structure.trend == "uptrend":
        score += 10
        reasons.append("HH and HL dominate the structure: uptrend (+10).")
    elif structure.trend == "downtrend":
        score -= 10
        reasons.append("LH and LL dominate the structure: downtrend (-10).")
    else:
        reasons.append("Structure is sideways, extra care needed (+0).")

    if bos.status == "bos_up":
        score += 7
        reasons.append("Break of structure up: new Higher High (+7).")
    elif bos.status == "bos_down":
        score -= 7
        reasons.append("Break of structure down: new Lower Low (-7).")

    rsi_val = indicators.rsi
    if rsi_val is None:
        reasons.append("RSI unavailable, not enough data (+0).")
    elif rsi_val > 55:
        score += 4
        reasons.append("RSI above 55: momentum leaning bullish (+4).")
    elif rsi_val < 45:
        score -= 4
        reasons.append("RSI below 45: momentum leaning bearish (-4).")
    else:
        reasons.append("RSI in the middle zone: moderate momentum (+0).")

    bb = indicators.bb
    if bb is None:
        reasons.append("Bollinger Bands unavailable, not enough data (+0).")
    else:
        price = indicators.price if indicators.price is not None else 0.0
        if price > bb.middle:
            score += 2
            reasons.append("Price above the BB mid band (+2).")
        elif price < bb.middle:
            score -= 2
            reasons.append("Price below the BB mid band (-2).")

    if pattern.direction == "bullish":
        delta = pattern.confidence * 10.0
        score += delta
        reasons.append(f"Bullish candlestick pattern detected: {pattern.name} (+{delta:.1f}).")
    elif pattern.direction == "bearish":
        delta = pattern.confidence * 10.0
        score -= delta
        reasons.append(f"Bearish candlestick pattern detected: {pattern.name} (-{delta:.1f}).")

    score = min(max(score, 0.0), 100.0)
    side, label = _side_and_label(score, trend_signal)

    return ConfluenceResult(
        score=round(score, 1),
        side=side,
        label=label,
        reasons=reasons,
        coaching=_COACHING[side],
    )
