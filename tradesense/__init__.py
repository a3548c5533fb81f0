"""
TradeSense: market intelligence and trade execution service.

Answers sentiment, price prediction and trading signal queries for an
asset symbol from a freshness-bounded result store, and executes trade
commands on BSC or NEAR, either in the user's direction or in the one
the trading signal picks.

Packages follow ports and adapters: ``domain`` holds the rules,
``application`` the use cases, ``infrastructure`` the SQL, HTTP and
chain adapters, ``interfaces`` the FastAPI routes, ``shared`` the
cross-cutting middleware and ``core`` settings and wiring.
"""
