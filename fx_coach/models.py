from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Candle:
    time_ms: int
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class SwingPoint:
    type: str  # swing_high or swing_low
    index: int
    time_ms: int
    price: float


@dataclass(frozen=True)
class LabeledPoint:
    type: str
    index: int
    time_ms: int
    price: float
    label: str  # H, L, HH, HL, LH, LL


@dataclass(frozen=True)
class MarketStructure:
    trend: str  # uptrend | downtrend | sideways | unknown
    bias: str  # buy_bias | sell_bias | neutral
    points: List[LabeledPoint] = field(default_factory=list)
    swings: List[SwingPoint] = field(default_factory=list)
    comment: str = ""


@dataclass(frozen=True)
class SnrLevel:
    type: str  # swing label (label strategy) or support/resistance (cluster strategy)
    price: float
    time_ms: Optional[int] = None
    touches: Optional[int] = None


@dataclass(frozen=True)
class BosEvent:
    status: str  # bos_up | bos_down | none
    direction: Optional[str]
    label: Optional[str]
    price: Optional[float]
    time_ms: Optional[int]
    note: str


@dataclass(frozen=True)
class PatternResult:
    name: str
    direction: str  # bullish | bearish | neutral
    confidence: float
    note: str


@dataclass(frozen=True)
class BollingerBands:
    middle: float
    upper: float
    lower: float


@dataclass(frozen=True)
class Indicators:
    sma_fast: Optional[float]
    sma_slow: Optional[float]
    rsi: Optional[float]
    atr: Optional[float]
    bb: Optional[BollingerBands]
    price: Optional[float]


@dataclass(frozen=True)
class ConfluenceResult:
    score: float
    side: str  # buy | sell | neutral
    label: str
    reasons: List[str]
    coaching: str


@dataclass(frozen=True)
class Analysis:
    status: str  # ok | not_enough_data
    trend_signal: str  # BUY | SELL | WAIT
    indicators: Indicators
    structure: MarketStructure
    snr_strategy: str
    snr: List[SnrLevel]
    bos: BosEvent
    pattern: PatternResult
    confluence: ConfluenceResult
    last_price: Optional[float] = None
    last_time_ms: Optional[int] = None
