"""
sqlrun – run a SQL script file statement by statement against MySQL or
PostgreSQL, reporting (not aborting on) individual statement failures.
"""

__version__ = "0.3.0"
