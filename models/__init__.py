"""
models/ - Domain Models
=======================
Plain dataclasses mirroring the database tables.
Repositories convert rows into these objects.
"""
