"""
db/ - Database Layer
====================
Connection acquisition, transaction scoping, parameter binding, row mapping
and schema creation for the PostgreSQL projects database.
Repositories build on these pieces; nothing here knows about the menu layer.
"""
