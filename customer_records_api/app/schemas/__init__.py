"""
Pydantic schema definitions for API payloads.

Schemas are kept separate from the SQL in ``services`` so the JSON
representation can evolve independently of the storage columns.
"""
