"""
repositories/ - Data Access Layer
==================================
Each repository owns the SQL for one aggregate. Every public operation runs
in its own transaction on its own connection and returns domain model objects.
"""
