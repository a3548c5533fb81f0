"""HTTP surface of the trading context."""
