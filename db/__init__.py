"""
db/ - Database Layer
====================
Handles the PostgreSQL connection pool, the query builder, transactions
and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
