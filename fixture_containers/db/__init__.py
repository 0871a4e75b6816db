"""
Database fixture containers.

Per-database defaults (credentials, ports, readiness probes) layered on the
container runner.
"""

from . import mysql, postgres
from .pool import PoolConnectionError, create_pool

__all__ = ['PoolConnectionError', 'create_pool', 'mysql', 'postgres']
