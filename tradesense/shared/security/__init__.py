"""HTTP hardening: response headers and request rate limits."""
