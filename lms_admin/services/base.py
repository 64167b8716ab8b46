"""
GrowthMindz Admin - Service Base
Injects the shared engine, schema catalog and query cascade into services
"""
from typing import Dict
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..database import QueryCascade, SchemaCatalog, is_unique_violation
from ..middleware.auth_middleware import get_current_user
from ..utils.exceptions import ConflictException


class DatabaseService:
    """Holds the pooled engine a service works against"""

    def __init__(self, engine=None, catalog=None):
        if engine is None:
            engine = current_app.extensions['sqlalchemy'].engine
            catalog = catalog or current_app.extensions.get('schema_catalog')
        self.engine = engine
        self.catalog = catalog or SchemaCatalog(engine, current_app.logger)
        self.cascade = QueryCascade(engine, self.catalog, current_app.logger)

    def _get_user_context(self) -> Dict:
        """Get current user context from Flask g"""
        user = get_current_user()
        if not user:
            return {'id': None, 'email': None, 'role': None, 'name': None}
        return user

    @staticmethod
    def _raise_conflict(error: IntegrityError, message: str, field: str = None):
        """Re-raise unique violations as conflicts, anything else unchanged"""
        if is_unique_violation(error):
            raise ConflictException(message, field=field) from error
        raise error
