"""
Service layer.

Each service receives a ``ConnectionPool`` and encapsulates the queries
for one entity, so API handlers never touch SQL directly.
"""
