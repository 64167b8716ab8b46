"""
GrowthMindz Admin - Custom Exceptions
Structured error handling for the application
"""


class AdminAPIException(Exception):
    """Base exception for the admin API"""
    def __init__(self, message, code='ERROR', status_code=500, details=None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class UnauthorizedException(AdminAPIException):
    """Authentication required or failed"""
    def __init__(self, message='Access denied. No token provided.'):
        super().__init__(message, code='UNAUTHORIZED', status_code=401)


class ForbiddenException(AdminAPIException):
    """Access denied due to insufficient permissions"""
    def __init__(self, message='Access denied'):
        super().__init__(message, code='FORBIDDEN', status_code=403)


class NotFoundException(AdminAPIException):
    """Resource not found"""
    def __init__(self, message='Resource not found', resource_type=None, resource_id=None):
        details = {}
        if resource_type:
            details['resource_type'] = resource_type
        if resource_id is not None:
            details['resource_id'] = str(resource_id)
        super().__init__(message, code='NOT_FOUND', status_code=404, details=details)


class ValidationException(AdminAPIException):
    """Input validation failed"""
    def __init__(self, message='Validation failed', fields=None):
        self.fields = fields or {}
        super().__init__(message, code='VALIDATION_ERROR', status_code=400, details={'fields': self.fields})


class ConflictException(AdminAPIException):
    """Unique constraint violated (e.g. duplicate email)"""
    def __init__(self, message='Email already in use', field=None):
        details = {'field': field} if field else {}
        super().__init__(message, code='CONFLICT', status_code=400, details=details)


class TokenExpiredException(AdminAPIException):
    """JWT token has expired"""
    def __init__(self, message='Invalid token.'):
        super().__init__(message, code='TOKEN_EXPIRED', status_code=400)


class InvalidTokenException(AdminAPIException):
    """JWT token is malformed or carries a bad signature"""
    def __init__(self, message='Invalid token.'):
        super().__init__(message, code='INVALID_TOKEN', status_code=400)


class DatabaseException(AdminAPIException):
    """Database operation failed"""
    def __init__(self, message='Database operation failed', operation=None):
        details = {}
        if operation:
            details['operation'] = operation
        super().__init__(message, code='DATABASE_ERROR', status_code=500, details=details)


class SchemaMismatchException(DatabaseException):
    """Every query variant for an operation failed on a missing table or column"""
    def __init__(self, operation, attempted=None):
        super().__init__('Server error', operation=operation)
        self.code = 'SCHEMA_MISMATCH'
        self.details['attempted'] = list(attempted or [])


class SchemaReconcileError(RuntimeError):
    """Required tables could not be created at startup"""
    def __init__(self, missing_tables):
        self.missing_tables = sorted(missing_tables)
        super().__init__(
            f"Required tables missing after reconciliation: {', '.join(self.missing_tables)}"
        )
