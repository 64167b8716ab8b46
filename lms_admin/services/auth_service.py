"""
GrowthMindz Admin - Authentication Service
Email/password login for the shared admins/staff account store
"""
from typing import Dict
from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .base import DatabaseService
from ..middleware.auth_middleware import create_access_token
from ..utils.exceptions import UnauthorizedException, ValidationException
from ..utils.passwords import verify_password


class AuthService(DatabaseService):
    """Service for administrator and staff authentication"""

    INVALID_CREDENTIALS = 'Invalid email or password'

    def login(self, email: str, password: str, role: str) -> Dict:
        if not email or not password or not role:
            raise ValidationException('All fields are required')
        if not all(isinstance(value, str) for value in (email, password, role)):
            raise ValidationException('Email, password and role must be strings')

        allowed_roles = current_app.config['ADMIN_ROLES']
        if role not in allowed_roles:
            raise ValidationException(
                f'Role must be one of: {", ".join(allowed_roles)}',
                fields={'role': role}
            )

        with self.engine.connect() as conn:
            row = conn.execute(text("""
                SELECT * FROM admins
                WHERE LOWER(email) = LOWER(:email) AND role = :role
            """), {"email": email.strip(), "role": role}).fetchone()

        if not row:
            current_app.logger.info(f"Login failed: no {role} account for {email.strip()}")
            raise UnauthorizedException(self.INVALID_CREDENTIALS)

        user = dict(row._mapping)
        valid, upgraded_hash = verify_password(password, user.get('password'))
        if not valid:
            current_app.logger.info(f"Login failed: bad password for account {user['id']}")
            raise UnauthorizedException(self.INVALID_CREDENTIALS)

        if upgraded_hash:
            self._store_password_hash(user['id'], upgraded_hash)

        token = create_access_token({
            'id': user['id'],
            'email': user['email'],
            'role': role,
            'name': user.get('name')
        })

        return {
            'message': 'Login successful',
            'token': token,
            'user': {
                'id': user['id'],
                'name': user.get('name'),
                'email': user['email'],
                'role': role
            }
        }

    def _store_password_hash(self, account_id, password_hash: str):
        """Replace a clear-text password left by an earlier revision"""
        try:
            with self.engine.connect() as conn:
                conn.execute(
                    text("UPDATE admins SET password = :pw WHERE id = :id"),
                    {"pw": password_hash, "id": account_id}
                )
                conn.commit()
            current_app.logger.info(f"Upgraded clear-text password for account {account_id}")
        except SQLAlchemyError as e:
            current_app.logger.warning(f"Password upgrade failed for account {account_id}: {e}")
