"""
Infrastructure adapters for the trading context.

Each adapter implements a domain port and connects to one
external system.
"""
