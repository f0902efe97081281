"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all queries for a specific domain entity.
Repositories are built on an executor (the Database, or a transaction
handle inside `Database.transaction`) and return result envelopes whose
data are domain model objects.
"""
