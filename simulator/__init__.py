"""
TradeGenie Market Simulator
===========================

Operational tooling around the market engines in ``app``.

Architecture
------------
- **Conditions**: deterministic, time-driven macro snapshot, re-sampled every 60 s
- **Engines**: risk, tariff and market data, read through one cached facade
- **Real-time**: WebSocket/SSE broadcast every 30 s, APScheduler refresh jobs

Quick start (CLI)
-----------------
    python -m simulator conditions --at 2024-06-01T12:00:00Z
    python -m simulator risk --country Turkey --product Energy
    python -m simulator tariff --product Electronics --from Germany --to France
    python -m simulator export --output data/markets.parquet
    python -m simulator scheduler              # refresh + broadcast loop
    python -m simulator stream                 # start WebSocket/SSE server

Public API
----------
    from simulator.realtime import RefreshScheduler, MarketStreamManager
"""
