"""HTTP interfaces: health check and the trading routes."""
