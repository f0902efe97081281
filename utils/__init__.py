"""
utils
-----
Logging setup and small helpers shared across the project.
"""
