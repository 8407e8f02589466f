"""
Market bounded context (domain layer).

Contains the condition sampler, the risk/tariff/market-data engines and
the entities they produce. No framework imports and no IO.
"""
