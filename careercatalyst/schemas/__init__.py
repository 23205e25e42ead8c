"""
Schemas module - API contract (what clients send and receive) and the
shapes generated results are validated against.

All schemas live in careercatalyst.schemas.schemas.
"""
