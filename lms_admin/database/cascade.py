"""
GrowthMindz Admin - Compatibility Query Cascade
Runs a logical read against whichever schema variant is live by trying query
variants richest-first and falling through only on missing table/column errors.
"""
import logging
from typing import Any, Dict, FrozenSet, List, NamedTuple, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from .errors import SCHEMA_ERRORS, classify_db_error
from ..utils.exceptions import SchemaMismatchException


class QueryVariant(NamedTuple):
    """One spelling of a logical query.

    retry_on limits which failure of the previous variant may lead here, so an
    alternate column spelling is only tried after an undefined_column error.
    """
    name: str
    sql: str
    retry_on: FrozenSet[str] = SCHEMA_ERRORS


class CascadeResult(NamedTuple):
    variant: Optional[str]
    rows: List[Dict[str, Any]]


class QueryCascade:
    """Executes ordered query variants for one logical operation"""

    def __init__(self, engine, catalog=None, logger=None):
        self.engine = engine
        self.catalog = catalog
        self.logger = logger or logging.getLogger(__name__)

    def fetch_all(self, operation: str, variants: Sequence[QueryVariant],
                  params: Dict = None, default: List = None) -> CascadeResult:
        """
        Return the rows of the first variant that runs.

        Errors other than undefined_column / undefined_table propagate
        unchanged. When every eligible variant hits a schema error the
        default is returned, or SchemaMismatchException raised if there is none.
        """
        params = params or {}
        attempted = []
        last_error_class = None

        for index, variant in enumerate(variants):
            if index > 0 and last_error_class not in variant.retry_on:
                continue

            attempted.append(variant.name)
            try:
                with self.engine.connect() as conn:
                    result = conn.execute(text(variant.sql), params)
                    rows = [dict(row._mapping) for row in result.fetchall()]
            except DBAPIError as e:
                error_class = classify_db_error(e)
                if error_class not in SCHEMA_ERRORS:
                    raise
                self._schema_changed()
                self.logger.info(
                    f"{operation}: variant '{variant.name}' unavailable ({error_class}), falling back"
                )
                last_error_class = error_class
                continue

            if index > 0:
                self.logger.info(f"{operation}: served by variant '{variant.name}'")
            return CascadeResult(variant.name, rows)

        if default is not None:
            self.logger.info(f"{operation}: no variant available, using default")
            return CascadeResult(None, list(default))

        self.logger.error(f"{operation}: all variants failed ({', '.join(attempted)})")
        raise SchemaMismatchException(operation, attempted)

    def fetch_one(self, operation: str, variants: Sequence[QueryVariant],
                  params: Dict = None, default: Dict = None) -> Optional[Dict[str, Any]]:
        fallback = [default] if default is not None else None
        result = self.fetch_all(operation, variants, params, default=fallback)
        return result.rows[0] if result.rows else None

    def _schema_changed(self):
        if self.catalog is not None:
            self.catalog.invalidate()
