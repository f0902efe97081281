"""
services/ - Business Logic Layer
================================
Each service receives an open Database, applies the business rules of
one area of the point of sale and returns result envelopes.
Services never raise for data-access failures: callers check `error`.
"""
