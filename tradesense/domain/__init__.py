"""
Domain layer.

Entities, payload shapes, the trade state machine and the ports adapters
implement. Imports nothing outside the standard library.
"""
