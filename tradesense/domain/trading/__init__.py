"""
Trading bounded context: domain layer.

This module contains all domain logic for the trading context:
- Analysis records and their freshness
- Sentiment, prediction and signal payload shapes
- Trade records and their state machine
- Trade command grammar and wallet selection
"""
