"""Data access managers for the API server.

Each module provides async functions that encapsulate entity-store access
and business logic.  Managers accept ``AsyncSession`` as a parameter and
raise domain exceptions (see ``errors``), never HTTP exceptions -- that
translation is the router's responsibility.
"""
