"""
Application layer for the trading context.

Market intelligence use cases resolve analyses through the shared
cache-aside resolver; trade use cases parse, route and execute commands.
"""
