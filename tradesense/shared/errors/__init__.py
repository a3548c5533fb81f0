"""
Shared error handling package.

Translates trading domain errors into JSON API responses in one place.
"""
