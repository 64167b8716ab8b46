"""
GrowthMindz Admin - Course Video Service
CRUD over the title-keyed courses_vedio table
"""
from typing import Dict, List
from flask import current_app
from sqlalchemy import text

from .base import DatabaseService
from ..database import UNDEFINED_COLUMN, QueryVariant
from ..utils.exceptions import NotFoundException, ValidationException
from ..utils.normalizers import normalize_course_video


BASE_COLUMNS = ('id', 'course_vedio_title', 'vedio_url', 'description')

LIST_BY_TITLE_VARIANTS = (
    QueryVariant('courses_vedio', """
        SELECT id, course_vedio_title, vedio_url, description, course_title, created_at
        FROM courses_vedio WHERE course_title = :course_title ORDER BY id
    """),
    QueryVariant('courses_vedio (no created_at)', """
        SELECT id, course_vedio_title, vedio_url, description, course_title
        FROM courses_vedio WHERE course_title = :course_title ORDER BY id
    """, frozenset({UNDEFINED_COLUMN})),
)


def _text_field(data: Dict, key: str) -> str:
    value = data.get(key)
    return value.strip() if isinstance(value, str) else ''


class CourseVideoService(DatabaseService):
    """Service for legacy course videos"""

    def _returning_columns(self, shape) -> List[str]:
        columns = list(BASE_COLUMNS)
        for optional in ('course_title', 'cid', 'created_at'):
            if shape.has_column('courses_vedio', optional):
                columns.append(optional)
        return columns

    def list_by_course_title(self, course_title: str) -> List[Dict]:
        title = (course_title or '').strip()
        if not title:
            raise ValidationException('course_title is required')

        result = self.cascade.fetch_all(
            'list course videos', LIST_BY_TITLE_VARIANTS, {"course_title": title}, default=[]
        )
        return [normalize_course_video(row) for row in result.rows]

    def create_video(self, data: Dict) -> Dict:
        """
        Insert a title-keyed video using only the columns this database has.

        Where courses_vedio carries cid, the course is resolved by title and
        created when it does not exist yet.
        """
        data = data or {}
        title = _text_field(data, 'course_vedio_title')
        url = _text_field(data, 'vedio_url')
        course_title = _text_field(data, 'course_title')
        description = data.get('description') or ''

        if not title or not url or not course_title:
            raise ValidationException('course_vedio_title, vedio_url and course_title are required')

        shape = self.catalog.shape(refresh=True)
        if not shape.has_legacy_videos:
            raise NotFoundException('Course videos are not available', resource_type='courses_vedio')

        values = {'course_vedio_title': title, 'vedio_url': url, 'description': description}
        if shape.legacy_videos_has_course_title:
            values['course_title'] = course_title

        columns = list(values)
        placeholders = [f":{column}" for column in values]
        if shape.legacy_videos_has_created_at:
            columns.append('created_at')
            placeholders.append('CURRENT_TIMESTAMP')

        returning = ', '.join(self._returning_columns(shape))

        with self.engine.begin() as conn:
            if shape.legacy_videos_has_cid:
                values['cid'] = self._resolve_course_id(conn, shape, course_title, description)
                columns.append('cid')
                placeholders.append(':cid')

            row = conn.execute(text(f"""
                INSERT INTO courses_vedio ({', '.join(columns)})
                VALUES ({', '.join(placeholders)})
                RETURNING {returning}
            """), values).fetchone()

        video = normalize_course_video(dict(row._mapping))
        current_app.logger.info(f"Course video {video['id']} added to '{course_title}'")
        return {'message': 'Video added successfully', 'video': video}

    def _resolve_course_id(self, conn, shape, course_title: str, description: str) -> int:
        row = conn.execute(
            text(f"SELECT id FROM courses WHERE {shape.course_title_expression} = :title ORDER BY id"),
            {"title": course_title}
        ).fetchone()
        if row:
            return row[0]

        course_values = {column: course_title for column in shape.course_title_columns}
        if shape.courses_has_description:
            course_values['description'] = description
        course_id = conn.execute(
            text(f"INSERT INTO courses ({', '.join(course_values)}) "
                 f"VALUES ({', '.join(':' + c for c in course_values)}) RETURNING id"),
            course_values
        ).scalar()
        current_app.logger.info(f"Course {course_id} created for video upload: {course_title}")
        return course_id

    def update_video(self, video_id: int, data: Dict) -> Dict:
        data = data or {}
        title = _text_field(data, 'course_vedio_title')
        url = _text_field(data, 'vedio_url')
        if not title or not url:
            raise ValidationException('course_vedio_title and vedio_url are required')

        returning = ', '.join(self._returning_columns(self.catalog.shape()))

        with self.engine.connect() as conn:
            row = conn.execute(text(f"""
                UPDATE courses_vedio
                SET course_vedio_title = :title, vedio_url = :url, description = :description
                WHERE id = :id
                RETURNING {returning}
            """), {
                "title": title,
                "url": url,
                "description": data.get('description') or '',
                "id": video_id
            }).fetchone()
            conn.commit()

        if not row:
            raise NotFoundException('Video not found', resource_type='courses_vedio', resource_id=video_id)

        return {'message': 'Video updated successfully', 'video': normalize_course_video(dict(row._mapping))}

    def delete_video(self, video_id: int) -> Dict:
        with self.engine.connect() as conn:
            result = conn.execute(text("DELETE FROM courses_vedio WHERE id = :id"), {"id": video_id})
            conn.commit()

        if result.rowcount == 0:
            raise NotFoundException('Video not found', resource_type='courses_vedio', resource_id=video_id)
        return {'message': 'Video deleted successfully'}
