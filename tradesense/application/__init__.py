"""
Application layer.

One use case per module, each exposing ``execute``. Use cases talk to
the outside world only through domain ports.
"""
