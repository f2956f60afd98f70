"""
db/ - Database Layer
====================
PostgreSQL connection pool and schema for the payments table.
Only repositories borrow connections from here; the engine never does.
"""
