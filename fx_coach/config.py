from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
import os
import yaml

from .profiles import resolve_analysis


def _env_override(value: Any, env_key: str) -> Any:
    env_val = os.getenv(env_key)
    if env_val is None:
        return value
    # basic parsing
    if isinstance(value, bool):
        return env_val.strip().lower() in ("1", "true", "yes", "y", "on")
    if isinstance(value, int):
        try:
            return int(env_val)
        except ValueError:
            return value
    if isinstance(value, float):
        try:
            return float(env_val)
        except ValueError:
            return value
    return env_val


@dataclass
class AnalysisConfig:
    profile: str = "classic"  # classic | scalp
    profile_strict: bool = False

    fast_length: int = 7
    slow_length: int = 25
    rsi_length: int = 14
    atr_length: int = 14
    bb_length: int = 20
    bb_mult: float = 2.0
    structure_sensitivity: int = 2
    snr_strategy: str = "label"  # label | cluster

    def signature(self) -> Dict[str, object]:
        return {
            "fast_length": self.fast_length,
            "slow_length": self.slow_length,
            "rsi_length": self.rsi_length,
            "atr_length": self.atr_length,
            "bb_length": self.bb_length,
            "bb_mult": self.bb_mult,
            "structure_sensitivity": self.structure_sensitivity,
            "snr_strategy": self.snr_strategy,
        }


@dataclass
class ProviderConfig:
    type: str = "twelvedata"
    base_url: str = "https://api.twelvedata.com"
    api_key: str = ""
    default_pair: str = "EURUSD"
    default_interval: str = "1min"
    outputsize: int = 200
    rest_timeout_s: int = 20
    rest_max_retries: int = 3
    rest_backoff_s: float = 0.8
    pairs: Optional[Dict[str, str]] = None  # alias -> provider symbol, merged over built-ins
    intervals: Optional[List[str]] = None


@dataclass
class CommentaryConfig:
    enabled: bool = True
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4.1-mini"
    temperature: float = 0.7
    timeout_s: int = 30


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 4567


@dataclass
class AppConfig:
    name: str = "FX Structure Coach"
    log_level: str = "INFO"


@dataclass
class Config:
    app: AppConfig
    provider: ProviderConfig
    analysis: AnalysisConfig
    commentary: CommentaryConfig
    server: ServerConfig


def load_config(path: Optional[str] = None) -> Config:
    raw: Dict[str, Any] = {}
    if path:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

    app = raw.get("app", {})
    provider = raw.get("provider", {})
    analysis = resolve_analysis(raw.get("analysis", {}))
    commentary = raw.get("commentary", {})
    server = raw.get("server", {})

    cfg = Config(
        app=AppConfig(**app),
        provider=ProviderConfig(**provider),
        analysis=AnalysisConfig(**analysis),
        commentary=CommentaryConfig(**commentary),
        server=ServerConfig(**server),
    )

    # env overrides (credentials stay out of the YAML on servers)
    cfg.provider.api_key = _env_override(cfg.provider.api_key, "TWELVEDATA_KEY")
    cfg.commentary.api_key = _env_override(cfg.commentary.api_key, "OPENAI_API_KEY")
    cfg.app.log_level = _env_override(cfg.app.log_level, "FX_COACH_LOG_LEVEL")
    cfg.server.port = _env_override(cfg.server.port, "PORT")

    if cfg.provider.pairs is None:
        cfg.provider.pairs = {}
    if cfg.provider.intervals is None:
        cfg.provider.intervals = ["1min", "5min", "15min"]

    return cfg
