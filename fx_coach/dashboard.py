DASHBOARD_HTML = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>FX Structure Coach</title>
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>
    body { margin: 0; padding: 12px; font-family: system-ui, sans-serif; background: #050510; color: #f5f5f5; }
    .card { background: #141a2b; border-radius: 12px; padding: 12px; margin-bottom: 12px; border: 1px solid #222a40; }
    .title { font-size: 18px; font-weight: 700; text-transform: uppercase; text-align: center; color: #00ffe7; }
    .row { display: flex; gap: 8px; flex-wrap: wrap; }
    .muted { color: #8a93a8; font-size: 12px; }
    .buy { color: #39ff88; } .sell { color: #ff4f6d; } .neutral { color: #ffd166; }
    pre { white-space: pre-wrap; font-size: 12px; }
    button, select { background: #0c1222; color: #f5f5f5; border: 1px solid #2c3550; border-radius: 8px; padding: 6px 10px; }
    #chart { width: 100%; height: 220px; }
  </style>
</head>
<body>
  <div class="card">
    <div class="title">FX Structure Coach</div>
    <div class="muted" style="text-align:center">Educational market monitor. Not financial advice.</div>
    <div class="row" style="justify-content:center;margin-top:8px">
      <select id="pair"><option>EURUSD</option><option>GBPUSD</option><option>USDJPY</option></select>
      <select id="tf"><option>1min</option><option>5min</option><option>15min</option></select>
      <button onclick="loadSignal()">Refresh</button>
      <button onclick="loadAi()">AI insight</button>
      <button id="autoBtn" onclick="toggleAutoRefresh()">Auto: ON</button>
      <select id="intervalSelect" onchange="restartAutoRefresh()"><option value="15">15s</option><option value="30">30s</option><option value="60" selected>60s</option><option value="300">5m</option></select>
    </div>
  </div>
  <div class="card"><canvas id="chart"></canvas></div>
  <div class="card">
    <div id="headline">Loading...</div>
    <div class="muted" id="meta"></div>
  </div>
  <div class="card"><b>Indicators</b>
    <div class="row muted">
      <span>RSI: <b id="rsiVal">-</b></span>
      <span>ATR: <b id="atrVal">-</b></span>
      <span>SMA fast: <b id="smaFastVal">-</b></span>
      <span>SMA slow: <b id="smaSlowVal">-</b></span>
    </div>
    <div class="muted" id="bbInfo">BB: -</div>
  </div>
  <div class="card"><b>Confluence</b><pre id="confluence"></pre></div>
  <div class="card"><b>Structure / BOS / SNR</b><pre id="structure"></pre></div>
  <div class="card"><b>Pattern</b><pre id="pattern"></pre></div>
  <div class="card"><b>AI commentary</b><pre id="ai">-</pre></div>
<script>
let last = null;

function fmt(v) { return (v === null || v === undefined) ? "-" : (typeof v === "number" ? v.toFixed(5) : v); }

function drawChart(candles) {
  const cv = document.getElementById("chart");
  const ctx = cv.getContext("2d");
  cv.width = cv.clientWidth; cv.height = cv.clientHeight;
  ctx.clearRect(0, 0, cv.width, cv.height);
  if (!candles || !candles.length) return;
  const hi = Math.max(...candles.map(c => c.high)), lo = Math.min(...candles.map(c => c.low));
  const w = cv.width / candles.length, y = p => cv.height - (p - lo) / ((hi - lo) || 1) * cv.height;
  candles.forEach((c, i) => {
    ctx.strokeStyle = ctx.fillStyle = c.close >= c.open ? "#39ff88" : "#ff4f6d";
    const x = i * w + w / 2;
    ctx.beginPath(); ctx.moveTo(x, y(c.high)); ctx.lineTo(x, y(c.low)); ctx.stroke();
    ctx.fillRect(i * w + 1, Math.min(y(c.open), y(c.close)), Math.max(w - 2, 1), Math.max(Math.abs(y(c.open) - y(c.close)), 1));
  });
}

function renderIndicators(ind) {
  const bb = ind.bb || {};
  document.getElementById("rsiVal").textContent = ind.rsi == null ? "-" : ind.rsi.toFixed(2);
  document.getElementById("atrVal").textContent = fmt(ind.atr);
  document.getElementById("smaFastVal").textContent = fmt(ind.sma_fast);
  document.getElementById("smaSlowVal").textContent = fmt(ind.sma_slow);
  document.getElementById("bbInfo").textContent = `BB mid ${fmt(bb.middle)} / upper ${fmt(bb.upper)} / lower ${fmt(bb.lower)}`;
}

async function loadSignal() {
  const pair = document.getElementById("pair").value, tf = document.getElementById("tf").value;
  const res = await fetch(`/signal?pair=${pair}&tf=${tf}`);
  const data = await res.json();
  if (!res.ok) { document.getElementById("headline").textContent = data.error || "Error"; return; }
  last = data;
  const c = data.confluence;
  document.getElementById("headline").innerHTML =
    `<span class="${c.side}">${c.label}</span> &middot; score ${c.score} &middot; MA signal ${data.signal}`;
  document.getElementById("meta").textContent = `${data.pair} ${data.timeframe} | last ${fmt(data.last_price)} @ ${data.last_time} UTC`;
  document.getElementById("confluence").textContent = c.reasons.join("\\n") + "\\n\\n" + c.coaching;
  const s = data.structure, b = data.bos;
  const snr = data.snr.map(l => `${l.type}: ${fmt(l.price)}${l.touches ? " x" + l.touches : ""}`).join("\\n");
  document.getElementById("structure").textContent =
    `Trend: ${s.trend} (${s.bias})\\n${s.comment}\\n\\nBOS: ${b.status}\\n${b.note}\\n\\nSNR (${data.snr_strategy}):\\n${snr}`;
  const p = data.pattern;
  document.getElementById("pattern").textContent = `${p.name} [${p.direction}, ${p.confidence}]\\n${p.note}`;
  renderIndicators(data.indicators || {});
  drawChart(data.candles);
}

async function loadAi() {
  if (!last) return;
  document.getElementById("ai").textContent = "Thinking...";
  const res = await fetch("/ai_insight", { method: "POST", headers: { "Content-Type": "application/json" }, body: JSON.stringify(last) });
  const data = await res.json();
  document.getElementById("ai").textContent = data.ai_comment || data.error || "-";
}

loadSignal();
let autoOn = true;
let autoTimer = null;

function restartAutoRefresh() {
  if (autoTimer) clearInterval(autoTimer);
  autoTimer = null;
  if (autoOn) autoTimer = setInterval(loadSignal, parseInt(document.getElementById("intervalSelect").value, 10) * 1000);
}

function toggleAutoRefresh() {
  autoOn = !autoOn;
  document.getElementById("autoBtn").textContent = autoOn ? "Auto: ON" : "Auto: OFF";
  restartAutoRefresh();
}

restartAutoRefresh();
</script>
</body>
</html>
"""
