"""
GrowthMindz Admin - Course Service
Course catalog with the video union across the modern and title-keyed tables
"""
from typing import Dict, List
from flask import current_app
from sqlalchemy import text

from .base import DatabaseService
from ..database import QueryVariant
from ..utils.exceptions import NotFoundException, ValidationException
from ..utils.normalizers import course_display_name, merge_course_videos, normalize_course


def _text_field(data: Dict, *keys) -> str:
    """First non-empty string among keys, stripped"""
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ''


MODERN_VIDEO_VARIANTS = (
    QueryVariant('videos', "SELECT * FROM videos ORDER BY id"),
)

LEGACY_QUIZ_VARIANTS = (
    QueryVariant('quizzes', "SELECT * FROM quizzes ORDER BY id"),
)

LEGACY_QUIZ_FIELDS = (
    ('title', 'title'),
    ('question', 'question'),
    ('option_a', 'optionA'),
    ('option_b', 'optionB'),
    ('option_c', 'optionC'),
    ('option_d', 'optionD'),
    ('correct_answer', 'correctAnswer'),
)


class CourseService(DatabaseService):
    """Service for courses and their modern content tables"""

    # =========================================================================
    # READ
    # =========================================================================

    def list_courses(self) -> List[Dict]:
        """All courses, each with its merged video list and legacy quizzes"""
        with self.engine.connect() as conn:
            result = conn.execute(text("SELECT * FROM courses ORDER BY id"))
            course_rows = [dict(row._mapping) for row in result.fetchall()]

        modern_videos = self.cascade.fetch_all('list videos', MODERN_VIDEO_VARIANTS, default=[]).rows
        legacy_videos = self._legacy_video_rows()
        quizzes = self.cascade.fetch_all('list legacy quizzes', LEGACY_QUIZ_VARIANTS, default=[]).rows

        quizzes_by_course = {}
        for quiz in quizzes:
            quizzes_by_course.setdefault(quiz.get('course_id'), []).append(quiz)

        return [
            normalize_course(
                row,
                videos=merge_course_videos(row['id'], course_display_name(row), modern_videos, legacy_videos),
                quizzes=quizzes_by_course.get(row['id'], [])
            )
            for row in course_rows
        ]

    def _legacy_video_rows(self) -> List[Dict]:
        shape = self.catalog.shape()
        if not shape.has_legacy_videos:
            return []

        columns = ['id', 'course_vedio_title', 'vedio_url', 'description']
        for optional in ('cid', 'course_title', 'created_at'):
            if shape.has_column('courses_vedio', optional):
                columns.append(optional)

        variants = (
            QueryVariant('courses_vedio', f"SELECT {', '.join(columns)} FROM courses_vedio ORDER BY id"),
        )
        return self.cascade.fetch_all('list legacy videos', variants, default=[]).rows

    # =========================================================================
    # WRITE
    # =========================================================================

    def create_course(self, data: Dict) -> Dict:
        data = data or {}
        title = _text_field(data, 'course_title', 'name')
        if not title:
            raise ValidationException('Course title is required')

        shape = self.catalog.shape(refresh=True)
        values = {column: title for column in shape.course_title_columns}
        if shape.courses_has_description:
            values['description'] = data.get('description') or ''

        columns = ', '.join(values)
        placeholders = ', '.join(f":{column}" for column in values)

        with self.engine.connect() as conn:
            course_id = conn.execute(
                text(f"INSERT INTO courses ({columns}) VALUES ({placeholders}) RETURNING id"),
                values
            ).scalar()
            conn.commit()

        current_app.logger.info(f"Course {course_id} created: {title}")
        course = normalize_course({'id': course_id, 'course_title': title,
                                   'description': values.get('description')})
        return {'message': 'Course added successfully', 'course': course}

    def delete_course(self, course_id: int) -> Dict:
        """
        Delete a course and its content rows in one transaction.

        Title-keyed videos are detached rather than deleted; they stay
        reachable through the course-videos endpoints.
        """
        shape = self.catalog.shape(refresh=True)

        with self.engine.begin() as conn:
            exists = conn.execute(
                text("SELECT id FROM courses WHERE id = :id"), {"id": course_id}
            ).fetchone()
            if not exists:
                raise NotFoundException('Course not found', resource_type='course', resource_id=course_id)

            if shape.legacy_videos_has_cid:
                conn.execute(text("UPDATE courses_vedio SET cid = NULL WHERE cid = :id"), {"id": course_id})
            if shape.has_table('quiz_content') and shape.has_table('quizes'):
                conn.execute(text(
                    "DELETE FROM quiz_content WHERE qid IN (SELECT qid FROM quizes WHERE cid = :id)"
                ), {"id": course_id})
            if shape.has_table('quizes'):
                conn.execute(text("DELETE FROM quizes WHERE cid = :id"), {"id": course_id})
            for table in ('videos', 'quizzes'):
                if shape.has_table(table):
                    conn.execute(text(f"DELETE FROM {table} WHERE course_id = :id"), {"id": course_id})

            conn.execute(text("DELETE FROM courses WHERE id = :id"), {"id": course_id})

        current_app.logger.info(f"Course {course_id} deleted")
        return {'message': 'Course deleted successfully'}

    def add_video(self, course_id: int, data: Dict) -> Dict:
        data = data or {}
        title = _text_field(data, 'title')
        if not title:
            raise ValidationException('Video title is required')

        self._ensure_course(course_id)

        with self.engine.connect() as conn:
            row = conn.execute(text("""
                INSERT INTO videos (course_id, title, description, video_url)
                VALUES (:course_id, :title, :description, :video_url)
                RETURNING *
            """), {
                "course_id": course_id,
                "title": title,
                "description": data.get('description') or '',
                "video_url": data.get('video_url') or ''
            }).fetchone()
            conn.commit()

        return {'message': 'Video added successfully', 'video': dict(row._mapping)}

    def add_legacy_quiz(self, course_id: int, data: Dict) -> Dict:
        """Single-question quiz; accepts camelCase or snake_case fields"""
        data = data or {}
        values = {}
        for column, camel in LEGACY_QUIZ_FIELDS:
            value = data.get(column, data.get(camel))
            values[column] = value.strip() if isinstance(value, str) else value

        missing = [column for column, value in values.items() if not value]
        if missing:
            raise ValidationException(
                'Title, question, four options and correct answer are required',
                fields={column: 'required' for column in missing}
            )

        self._ensure_course(course_id)

        with self.engine.connect() as conn:
            row = conn.execute(text("""
                INSERT INTO quizzes (course_id, title, question, option_a, option_b,
                                     option_c, option_d, correct_answer)
                VALUES (:course_id, :title, :question, :option_a, :option_b,
                        :option_c, :option_d, :correct_answer)
                RETURNING *
            """), {**values, "course_id": course_id}).fetchone()
            conn.commit()

        return {'message': 'Quiz added successfully', 'quiz': dict(row._mapping)}

    def _ensure_course(self, course_id: int):
        with self.engine.connect() as conn:
            row = conn.execute(
                text("SELECT id FROM courses WHERE id = :id"), {"id": course_id}
            ).fetchone()
        if not row:
            raise NotFoundException('Course not found', resource_type='course', resource_id=course_id)
