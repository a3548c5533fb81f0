"""
Infrastructure layer.

Adapters for the SQL store, the hosted inference endpoints and the
chain RPC nodes, plus the table metadata they share.
"""
