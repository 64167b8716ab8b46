"""
GrowthMindz Admin - Schema compatibility layer
Startup reconciliation, schema shape probing and fallback query execution
"""
from .catalog import SchemaCatalog, SchemaShape, probe_schema
from .cascade import CascadeResult, QueryCascade, QueryVariant
from .errors import (
    SCHEMA_ERRORS,
    UNDEFINED_COLUMN,
    UNDEFINED_TABLE,
    UNIQUE_VIOLATION,
    classify_db_error,
    is_unique_violation,
)
from .reconciler import ReconcileReport, SchemaReconciler

__all__ = [
    'SchemaCatalog',
    'SchemaShape',
    'probe_schema',
    'CascadeResult',
    'QueryCascade',
    'QueryVariant',
    'SCHEMA_ERRORS',
    'UNDEFINED_COLUMN',
    'UNDEFINED_TABLE',
    'UNIQUE_VIOLATION',
    'classify_db_error',
    'is_unique_violation',
    'ReconcileReport',
    'SchemaReconciler',
]
