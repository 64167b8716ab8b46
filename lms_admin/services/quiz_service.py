"""
GrowthMindz Admin - Quiz Service
Normalized quizzes (quizes header + quiz_content questions), written atomically
"""
from typing import Dict, List, Optional
from flask import current_app
from sqlalchemy import bindparam, text

from .base import DatabaseService
from ..utils.exceptions import NotFoundException, ValidationException
from ..utils.normalizers import nest_quiz_questions


QUESTION_FIELDS = ('question', 'option_a', 'option_b', 'option_c', 'option_d', 'correct_answer')


def _question_values(item) -> Optional[Dict]:
    """All question fields, or None when any is missing or blank"""
    if not isinstance(item, dict):
        return None
    values = {}
    for field in QUESTION_FIELDS:
        value = item.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        values[field] = value
    return values


def _as_int(value, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationException(f'{field} must be an integer', fields={field: value})


class QuizService(DatabaseService):
    """Service for normalized quizzes"""

    def _header_columns(self) -> str:
        columns = ['qid', 'cid', 'quiz_title']
        if self.catalog.shape().has_column('quizes', 'created_at'):
            columns.append('created_at')
        return ', '.join(columns)

    def _fetch_quiz(self, conn, qid: int, columns: str) -> Optional[Dict]:
        row = conn.execute(
            text(f"SELECT {columns} FROM quizes WHERE qid = :qid"), {"qid": qid}
        ).fetchone()
        if not row:
            return None
        questions = conn.execute(
            text("SELECT * FROM quiz_content WHERE qid = :qid ORDER BY question_id"), {"qid": qid}
        ).fetchall()
        return nest_quiz_questions([dict(row._mapping)], [dict(q._mapping) for q in questions])[0]

    # =========================================================================
    # CREATE
    # =========================================================================

    def create_quiz(self, data: Dict) -> Dict:
        """
        Create a quiz header and its questions as one unit.

        Accepts either a questions list or the fields of a single question at
        the top level. A question missing any field rolls back the whole quiz.
        """
        data = data or {}
        questions = data.get('questions')
        if isinstance(questions, list) and questions:
            items = questions
        elif data.get('question'):
            items = [{field: data.get(field) for field in QUESTION_FIELDS}]
        else:
            items = []

        quiz_title = (data.get('quiz_title') or '').strip() if isinstance(data.get('quiz_title'), str) else ''
        if not data.get('cid') or not quiz_title or not items:
            raise ValidationException('cid, quiz_title and at least one question are required')
        cid = _as_int(data.get('cid'), 'cid')

        shape = self.catalog.shape(refresh=True)
        returning = self._header_columns()
        header_columns = ['cid', 'quiz_title']
        header_values = [':cid', ':quiz_title']
        if shape.has_column('quizes', 'created_at'):
            header_columns.append('created_at')
            header_values.append('CURRENT_TIMESTAMP')

        with self.engine.begin() as conn:
            if not conn.execute(text("SELECT id FROM courses WHERE id = :id"), {"id": cid}).fetchone():
                raise NotFoundException('Course not found', resource_type='course', resource_id=cid)

            quiz = dict(conn.execute(text(f"""
                INSERT INTO quizes ({', '.join(header_columns)})
                VALUES ({', '.join(header_values)})
                RETURNING {returning}
            """), {"cid": cid, "quiz_title": quiz_title}).fetchone()._mapping)

            inserted = []
            for position, item in enumerate(items, start=1):
                values = _question_values(item)
                if values is None:
                    raise ValidationException(
                        'Each question requires question, option_a, option_b, option_c, '
                        'option_d and correct_answer',
                        fields={'question': position}
                    )
                row = conn.execute(text("""
                    INSERT INTO quiz_content (qid, question, option_a, option_b, option_c,
                                              option_d, correct_answer)
                    VALUES (:qid, :question, :option_a, :option_b, :option_c,
                            :option_d, :correct_answer)
                    RETURNING *
                """), {**values, "qid": quiz['qid']}).fetchone()
                inserted.append(dict(row._mapping))

        current_app.logger.info(f"Quiz {quiz['qid']} created with {len(inserted)} question(s)")
        return {'message': 'Quiz created successfully', 'quiz': {**quiz, 'questions': inserted}}

    # =========================================================================
    # UPDATE
    # =========================================================================

    def update_quiz(self, qid: int, data: Dict) -> Dict:
        """Header change, question deletions and question upserts in one transaction"""
        data = data or {}
        deleted_ids = data.get('deleted_question_ids') or []
        questions = data.get('questions')

        if not isinstance(deleted_ids, list):
            raise ValidationException('deleted_question_ids must be a list')
        if questions is not None and not isinstance(questions, list):
            raise ValidationException('questions must be a list')
        deleted_ids = [_as_int(question_id, 'deleted_question_ids') for question_id in deleted_ids]

        header = {}
        quiz_title = data.get('quiz_title')
        if quiz_title is not None:
            if not isinstance(quiz_title, str) or not quiz_title.strip():
                raise ValidationException('quiz_title must be a non-empty string', fields={'quiz_title': quiz_title})
            header['quiz_title'] = quiz_title.strip()
        if data.get('cid'):
            header['cid'] = _as_int(data['cid'], 'cid')

        columns = self._header_columns()

        with self.engine.begin() as conn:
            exists = conn.execute(
                text("SELECT qid FROM quizes WHERE qid = :qid"), {"qid": qid}
            ).fetchone()
            if not exists:
                raise NotFoundException('Quiz not found', resource_type='quiz', resource_id=qid)

            if header:
                set_clause = ', '.join(f"{column} = :{column}" for column in header)
                conn.execute(text(f"UPDATE quizes SET {set_clause} WHERE qid = :qid"), {**header, "qid": qid})

            if deleted_ids:
                conn.execute(
                    text("DELETE FROM quiz_content WHERE qid = :qid AND question_id IN :ids")
                    .bindparams(bindparam('ids', expanding=True)),
                    {"qid": qid, "ids": deleted_ids}
                )

            for item in questions or []:
                self._upsert_question(conn, qid, item)

            quiz = self._fetch_quiz(conn, qid, columns)

        current_app.logger.info(f"Quiz {qid} updated")
        return {'message': 'Quiz updated successfully', 'quiz': quiz}

    def _upsert_question(self, conn, qid: int, item):
        if not isinstance(item, dict):
            raise ValidationException('Each question must be an object')

        question_id = item.get('question_id')
        if question_id:
            changes = {field: item[field] for field in QUESTION_FIELDS if item.get(field)}
            if not changes:
                return
            set_clause = ', '.join(f"{field} = :{field}" for field in changes)
            conn.execute(
                text(f"UPDATE quiz_content SET {set_clause} WHERE question_id = :question_id AND qid = :qid"),
                {**changes, "question_id": _as_int(question_id, 'question_id'), "qid": qid}
            )
            return

        values = _question_values(item)
        if values is None:
            raise ValidationException('New questions require all fields')
        conn.execute(text("""
            INSERT INTO quiz_content (qid, question, option_a, option_b, option_c,
                                      option_d, correct_answer)
            VALUES (:qid, :question, :option_a, :option_b, :option_c,
                    :option_d, :correct_answer)
        """), {**values, "qid": qid})

    # =========================================================================
    # DELETE / READ
    # =========================================================================

    def delete_quiz(self, qid: int) -> Dict:
        with self.engine.begin() as conn:
            conn.execute(text("DELETE FROM quiz_content WHERE qid = :qid"), {"qid": qid})
            result = conn.execute(text("DELETE FROM quizes WHERE qid = :qid"), {"qid": qid})
            if result.rowcount == 0:
                raise NotFoundException('Quiz not found', resource_type='quiz', resource_id=qid)

        current_app.logger.info(f"Quiz {qid} deleted")
        return {'message': 'Quiz deleted successfully'}

    def list_for_course(self, cid: int) -> List[Dict]:
        """Quizzes of a course, each with its questions nested"""
        columns = self._header_columns()
        with self.engine.connect() as conn:
            quizzes = [dict(row._mapping) for row in conn.execute(
                text(f"SELECT {columns} FROM quizes WHERE cid = :cid ORDER BY qid"),
                {"cid": cid}
            ).fetchall()]

            questions = []
            if quizzes:
                questions = [dict(row._mapping) for row in conn.execute(
                    text("SELECT * FROM quiz_content WHERE qid IN :qids ORDER BY question_id")
                    .bindparams(bindparam('qids', expanding=True)),
                    {"qids": [quiz['qid'] for quiz in quizzes]}
                ).fetchall()]

        return nest_quiz_questions(quizzes, questions)
