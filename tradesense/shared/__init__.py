"""
Cross-cutting pieces of the HTTP service: logging setup, the clock,
error-to-response mapping, response headers and rate limits.
"""
