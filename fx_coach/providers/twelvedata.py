from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import aiohttp

from ..models import Candle

log = logging.getLogger("twelvedata")

DEFAULT_PAIR_ALIASES: Dict[str, str] = {
    "EURUSD": "EUR/USD",
    "GBPUSD": "GBP/USD",
    "USDJPY": "USD/JPY",
}

DEFAULT_INTERVALS = ("1min", "5min", "15min")

_DT_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d")


def normalize_pair(pair: Optional[str], aliases: Optional[Dict[str, str]] = None) -> str:
    table = dict(DEFAULT_PAIR_ALIASES)
    table.update({k.upper(): v for k, v in (aliases or {}).items()})
    key = (pair or "EURUSD").strip()
    return table.get(key.upper(), key)


def normalize_interval(interval: Optional[str], allowed=DEFAULT_INTERVALS) -> str:
    interval = (interval or "").strip()
    if interval in allowed:
        return interval
    return "1min"


def _parse_dt_ms(text: str) -> int:
    for fmt in _DT_FORMATS:
        try:
            dt = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return int(dt.replace(tzinfo=timezone.utc).timestamp() * 1000)
    raise ValueError(f"Unsupported datetime format: {text}")


def parse_time_series(body: Dict[str, Any]) -> List[Candle]:
    """Convert a /time_series payload (newest first) into candles oldest -> newest."""
    rows = body.get("values") or []
    out: List[Candle] = []
    for row in rows:
        out.append(Candle(
            time_ms=_parse_dt_ms(row["datetime"]),
            open=float(row["open"]),
            high=float(row["high"]),
            low=float(row["low"]),
            close=float(row["close"]),
        ))
    out.reverse()
    return out


class TwelveDataProvider:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.twelvedata.com",
        rest_timeout_s: int = 20,
        rest_max_retries: int = 3,
        rest_backoff_s: float = 0.8,
    ):
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")
        self.rest_timeout_s = rest_timeout_s
        self.rest_max_retries = rest_max_retries
        self.rest_backoff_s = rest_backoff_s

        self._session: Optional[aiohttp.ClientSession] = None

    def enabled(self) -> bool:
        return bool(self.api_key)

    async def close(self) -> None:
        """Close the shared aiohttp session (best-effort)."""
        if self._session is not None and not self._session.closed:
            await self._session.close()

    def _timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.rest_timeout_s,
            connect=min(10, self.rest_timeout_s),
            sock_read=max(10, int(self.rest_timeout_s * 0.75)),
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout())
        return self._session

    async def fetch_candles(self, pair: str, interval: str = "1min", limit: int = 200) -> List[Candle]:
        if not self.enabled():
            log.warning("fetch_skipped reason=no_api_key pair=%s tf=%s", pair, interval)
            return []

        url = self.base_url + "/time_series"
        params = {
            "symbol": pair,
            "interval": interval,
            "outputsize": int(limit),
            "format": "JSON",
            "timezone": "UTC",
            "apikey": self.api_key,
        }

        sess = await self._get_session()

        backoff = float(self.rest_backoff_s)
        last_err: Optional[BaseException] = None
        body: Dict[str, Any] = {}
        for attempt in range(1, int(self.rest_max_retries) + 1):
            try:
                async with sess.get(url, params=params) as resp:
                    if resp.status != 429 and resp.status != 200:
                        txt = await resp.text()
                        raise RuntimeError(f"TwelveData time_series failed: {resp.status} {txt[:500]}")
                    body = await resp.json(content_type=None) if resp.status == 200 else {"code": 429}

                # Rate limits can also come back as HTTP 200 with an error body.
                if body.get("code") == 429:
                    log.warning(
                        "rest_rate_limited attempt=%d/%d pair=%s tf=%s sleep=%.1fs",
                        attempt,
                        self.rest_max_retries,
                        pair,
                        interval,
                        backoff,
                    )
                    last_err = RuntimeError("TwelveData rate limit")
                    await asyncio.sleep(backoff)
                    backoff = min(backoff * 2.0, 20.0)
                    continue

                if body.get("status") == "error":
                    raise RuntimeError(f"TwelveData error: {body.get('code')} {str(body.get('message'))[:500]}")

                last_err = None
                break

            except (asyncio.TimeoutError, aiohttp.ClientError) as e:
                last_err = e
                if attempt >= int(self.rest_max_retries):
                    break
                log.warning(
                    "rest_timeout_or_client_err attempt=%d/%d pair=%s tf=%s backoff=%.1fs err=%s",
                    attempt,
                    self.rest_max_retries,
                    pair,
                    interval,
                    backoff,
                    e,
                )
                await asyncio.sleep(backoff)
                backoff = min(backoff * 2.0, 20.0)

        if last_err is not None:
            raise last_err

        candles = parse_time_series(body)
        log.info("fetched pair=%s tf=%s candles=%d", pair, interval, len(candles))
        return candles
