"""
TradeGenie Market Engine - market-condition simulator and derived metrics API.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters) with domain-driven design.

Bounded contexts:
    - market: Condition sampling, risk, tariffs, market size/growth,
      economic indicators and headlines.

Layers:
    - domain: Pure business logic, entities, ports (ABCs), errors.
    - application: Query facade, use cases, DTOs.
    - infrastructure: Adapters (reference tables, result cache) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""
