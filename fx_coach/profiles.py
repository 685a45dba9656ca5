from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict

if TYPE_CHECKING:
    from .config import AnalysisConfig

log = logging.getLogger("profiles")

PROFILE_DEFAULTS: Dict[str, Dict[str, object]] = {
    "classic": {
        "fast_length": 7,
        "slow_length": 25,
        "rsi_length": 14,
        "atr_length": 14,
        "bb_length": 20,
        "bb_mult": 2.0,
        "structure_sensitivity": 2,
        "snr_strategy": "label",
    },
    "scalp": {
        "fast_length": 5,
        "slow_length": 20,
        "rsi_length": 14,
        "atr_length": 14,
        "bb_length": 20,
        "bb_mult": 2.0,
        "structure_sensitivity": 2,
        "snr_strategy": "cluster",
    },
}


def resolve_analysis(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Start from the named profile's values; explicit keys in `raw` win."""
    raw = dict(raw or {})
    profile = str(raw.get("profile") or "classic").lower()
    if profile not in PROFILE_DEFAULTS:
        raise ValueError(f"Unknown analysis profile: {profile} (use one of {', '.join(PROFILE_DEFAULTS)})")
    merged: Dict[str, Any] = dict(PROFILE_DEFAULTS[profile])
    merged.update(raw)
    merged["profile"] = profile
    return merged


def analysis_signature(cfg: "AnalysisConfig") -> Dict[str, object]:
    return cfg.signature()


def assert_profile_inputs(cfg: "AnalysisConfig") -> None:
    sig = analysis_signature(cfg)
    expected = PROFILE_DEFAULTS.get(cfg.profile, {})
    mismatches = []
    for k, v in expected.items():
        if sig.get(k) != v:
            mismatches.append(f"{k}: cfg={sig.get(k)} expected={v}")
    if mismatches:
        raise ValueError(f"analysis inputs mismatch profile '{cfg.profile}': " + "; ".join(mismatches))


def log_analysis_signature(cfg: "AnalysisConfig") -> None:
    sig = analysis_signature(cfg)
    log.info("ANALYSIS INPUTS profile=%s (profile_strict=%s): %s", cfg.profile, cfg.profile_strict, sig)
    if not cfg.profile_strict:
        try:
            assert_profile_inputs(cfg)
        except ValueError as e:
            log.warning("profile_override %s", e)
