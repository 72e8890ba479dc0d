"""
Pydantic schema definitions for API payloads.

Schemas are separated from the storage backends so the API
representation stays the same whichever backend is active.
"""
