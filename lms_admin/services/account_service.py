"""
GrowthMindz Admin - Account Service
Profiles and staff management over the single admins table
"""
from typing import Dict, List, Optional
from flask import current_app
from sqlalchemy import bindparam, text
from sqlalchemy.exc import IntegrityError

from .base import DatabaseService
from ..middleware.rbac_middleware import ROLE_STAFF, is_admin, is_valid_role
from ..utils.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException
)
from ..utils.normalizers import public_account, sanitize_profile
from ..utils.passwords import hash_password


PROFILE_COLUMNS = 'id, name, email, phone, role'
STAFF_COLUMNS = 'id, name, email, phone'


def _clean(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _phone(value) -> Optional[str]:
    if value is None or value == '':
        return None
    return str(value).strip()


class AccountService(DatabaseService):
    """Service for admin/staff accounts"""

    # =========================================================================
    # PROFILE OPERATIONS
    # =========================================================================

    def get_profile(self, account_id) -> Dict:
        """Sanitized profile of the given account"""
        with self.engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {PROFILE_COLUMNS} FROM admins WHERE id = :id"),
                {"id": account_id}
            ).fetchone()

        if not row:
            raise NotFoundException('Profile not found', resource_type='admin', resource_id=account_id)

        return sanitize_profile(dict(row._mapping))

    def update_profile(self, account_id, data: Dict) -> Dict:
        """Update the caller's own profile"""
        target = self._find_account("id = :key", account_id)
        return self._apply_profile_update(target, data)

    def update_profile_by_email(self, email: str, data: Dict) -> Dict:
        """Update the profile identified by its current email"""
        if not email:
            raise ValidationException('Email parameter required')

        target = self._find_account("LOWER(email) = LOWER(:key)", email.strip())

        if not is_admin() and self._get_user_context()['id'] != target['id']:
            raise ForbiddenException('You can only update your own profile')

        return self._apply_profile_update(target, data)

    def _find_account(self, condition: str, key) -> Dict:
        with self.engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {PROFILE_COLUMNS} FROM admins WHERE {condition}"),
                {"key": key}
            ).fetchone()
        if not row:
            raise NotFoundException('Profile not found', resource_type='admin')
        return dict(row._mapping)

    def _apply_profile_update(self, target: Dict, data: Dict) -> Dict:
        """
        Shared update path for both profile endpoints.

        Role changes are honoured only when the caller is an Admin; a password
        change needs password and confirm_password.
        """
        data = data or {}
        name = _clean(data.get('name'))
        email = _clean(data.get('email')).lower()

        if not name or not email:
            raise ValidationException('Name and email are required')

        new_password = self._validated_password_change(data)

        fields = {'name': name, 'email': email, 'phone': _phone(data.get('phone'))}

        role = data.get('role')
        if role and is_admin():
            if not is_valid_role(role):
                raise ValidationException('Role must be Admin or Staff', fields={'role': role})
            fields['role'] = role

        if new_password:
            fields['password'] = hash_password(new_password)

        self._ensure_email_available(email, exclude_id=target['id'], message='Email already in use')

        set_clause = ', '.join(f"{column} = :{column}" for column in fields)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    text(f"UPDATE admins SET {set_clause} WHERE id = :id RETURNING {PROFILE_COLUMNS}"),
                    {**fields, "id": target['id']}
                ).fetchone()
                conn.commit()
        except IntegrityError as e:
            self._raise_conflict(e, 'Email already in use', field='email')

        if not row:
            raise NotFoundException('Profile not found', resource_type='admin', resource_id=target['id'])

        updated = dict(row._mapping)
        current_app.logger.info(f"Profile {updated['id']} updated")
        return {
            'message': 'Profile updated successfully',
            'profile': public_account(updated, ('name', 'email', 'phone', 'role'))
        }

    def _validated_password_change(self, data: Dict) -> Optional[str]:
        password = data.get('password')
        confirm = data.get('confirm_password')
        if not password and not confirm:
            return None

        if not password or not confirm:
            raise ValidationException('Both password and confirm_password are required')
        if password != confirm:
            raise ValidationException('Passwords do not match')
        self._check_password_length(password)
        return password

    @staticmethod
    def _check_password_length(password: str):
        min_length = current_app.config.get('PASSWORD_MIN_LENGTH', 6)
        if len(password) < min_length:
            raise ValidationException(f'Password must be at least {min_length} characters')

    def _ensure_email_available(self, email: str, exclude_id=None, message='Email already exists'):
        """Case-insensitive uniqueness check across Admin and Staff accounts"""
        query = "SELECT id FROM admins WHERE LOWER(email) = LOWER(:email)"
        params = {"email": email}
        if exclude_id is not None:
            query += " AND id <> :exclude_id"
            params["exclude_id"] = exclude_id

        with self.engine.connect() as conn:
            if conn.execute(text(query), params).fetchone():
                raise ConflictException(message, field='email')

    # =========================================================================
    # STAFF MANAGEMENT
    # =========================================================================

    def list_staff(self) -> List[Dict]:
        with self.engine.connect() as conn:
            result = conn.execute(
                text(f"SELECT {STAFF_COLUMNS} FROM admins WHERE role = :role ORDER BY id"),
                {"role": ROLE_STAFF}
            )
            return [dict(row._mapping) for row in result.fetchall()]

    def count_staff(self) -> int:
        with self.engine.connect() as conn:
            return conn.execute(
                text("SELECT COUNT(*) FROM admins WHERE role = :role"),
                {"role": ROLE_STAFF}
            ).scalar() or 0

    def create_staff(self, data: Dict) -> Dict:
        data = data or {}
        name = _clean(data.get('name'))
        email = _clean(data.get('email')).lower()
        password = data.get('password') or ''

        if not name or not email or not password:
            raise ValidationException('Name, email and password are required')
        self._check_password_length(password)
        self._ensure_email_available(email)

        try:
            with self.engine.connect() as conn:
                row = conn.execute(text(f"""
                    INSERT INTO admins (name, email, password, phone, role)
                    VALUES (:name, :email, :password, :phone, :role)
                    RETURNING {STAFF_COLUMNS}
                """), {
                    "name": name,
                    "email": email,
                    "password": hash_password(password),
                    "phone": _phone(data.get('phone')),
                    "role": ROLE_STAFF
                }).fetchone()
                conn.commit()
        except IntegrityError as e:
            self._raise_conflict(e, 'Email already exists', field='email')

        staff = dict(row._mapping)
        current_app.logger.info(f"Staff account {staff['id']} created")
        return {'message': 'Staff added successfully', 'staff': staff}

    def update_staff(self, staff_id, data: Dict) -> Dict:
        data = data or {}
        name = _clean(data.get('name'))
        email = _clean(data.get('email')).lower()
        password = data.get('password')

        if not name or not email:
            raise ValidationException('Name and email are required')

        fields = {'name': name, 'email': email, 'phone': _phone(data.get('phone'))}
        if password:
            self._check_password_length(password)
            fields['password'] = hash_password(password)

        self._ensure_email_available(email, exclude_id=staff_id)

        set_clause = ', '.join(f"{column} = :{column}" for column in fields)
        try:
            with self.engine.connect() as conn:
                row = conn.execute(text(f"""
                    UPDATE admins SET {set_clause}
                    WHERE id = :id AND role = :role
                    RETURNING {STAFF_COLUMNS}
                """), {**fields, "id": staff_id, "role": ROLE_STAFF}).fetchone()
                conn.commit()
        except IntegrityError as e:
            self._raise_conflict(e, 'Email already exists', field='email')

        if not row:
            raise NotFoundException('Staff not found', resource_type='staff', resource_id=staff_id)

        return {'message': 'Staff updated successfully', 'staff': dict(row._mapping)}

    def delete_staff(self, ids) -> Dict:
        if not isinstance(ids, list) or not ids:
            raise ValidationException('No staff IDs provided')
        try:
            ids = [int(staff_id) for staff_id in ids]
        except (TypeError, ValueError):
            raise ValidationException('Staff IDs must be integers', fields={'ids': ids})

        statement = text(
            "DELETE FROM admins WHERE role = :role AND id IN :ids"
        ).bindparams(bindparam('ids', expanding=True))

        with self.engine.connect() as conn:
            result = conn.execute(statement, {"role": ROLE_STAFF, "ids": ids})
            conn.commit()

        current_app.logger.info(f"Deleted {result.rowcount} staff account(s)")
        return {'message': 'Staff deleted successfully', 'deleted': result.rowcount}
