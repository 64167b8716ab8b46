"""
GrowthMindz Admin - Response Normalizers
One external shape per entity, whatever schema variant produced the row
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional


NO_COURSE = 'No Course'
LEGACY_VIDEO_SOURCE = 'courses_vedio'

_NON_NEGATIVE_INT = re.compile(r'^[0-9]+$')


def _first_present(*values):
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


# ============================================================================
# PROGRESS
# ============================================================================

def coerce_progress(value) -> Optional[int]:
    """
    Stored progress as an int in [0, 100], or None when it is not a
    well-formed non-negative integer.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    if isinstance(value, (float, Decimal)):
        try:
            value = int(value) if value == int(value) else value
        except (ValueError, OverflowError, InvalidOperation):
            return None
    as_text = str(value).strip()
    if not _NON_NEGATIVE_INT.match(as_text):
        return None
    return min(int(as_text), 100)


def round_progress_average(value) -> Optional[int]:
    """Round an aggregated average half away from zero, clamped to [0, 100]."""
    if value is None:
        return None
    try:
        rounded = Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None
    return max(0, min(int(rounded), 100))


def resolve_progress(*sources, average=None) -> int:
    """First well-formed stored progress, else the rounded average, else 0."""
    for source in sources:
        progress = coerce_progress(source)
        if progress is not None:
            return progress
    averaged = round_progress_average(average)
    return averaged if averaged is not None else 0


# ============================================================================
# LEARNERS
# ============================================================================

def normalize_learner(row: Dict[str, Any]) -> Dict[str, Any]:
    """Learner row from any users/enrollment variant"""
    course_label = _first_present(row.get('course_opted'), row.get('course_title'))
    return {
        'id': row.get('id'),
        'first_name': row.get('first_name') or '',
        'last_name': row.get('last_name') or '',
        'email': row.get('email'),
        'course_opted': str(course_label) if course_label is not None else NO_COURSE,
        'progress': resolve_progress(row.get('progress'), average=row.get('progress_avg')),
    }


# ============================================================================
# COURSES & VIDEOS
# ============================================================================

def course_display_name(row: Dict[str, Any]) -> str:
    return _first_present(row.get('course_title'), row.get('name')) or ''


def normalize_video(row: Dict[str, Any]) -> Dict[str, Any]:
    video = dict(row)
    video['video_url'] = row.get('video_url') or ''
    return video


def normalize_legacy_video(row: Dict[str, Any], course_id=None) -> Dict[str, Any]:
    """courses_vedio row in the shape of a videos row"""
    return {
        'id': row.get('id'),
        'course_id': course_id if course_id is not None else row.get('cid'),
        'title': row.get('course_vedio_title'),
        'description': row.get('description') or '',
        'video_url': row.get('video_url') or row.get('vedio_url') or '',
        'created_at': row.get('created_at'),
        'source': LEGACY_VIDEO_SOURCE,
    }


def normalize_course_video(row: Dict[str, Any]) -> Dict[str, Any]:
    """courses_vedio row as returned by the course-videos endpoints"""
    video = dict(row)
    video['video_url'] = row.get('vedio_url') or ''
    video.setdefault('created_at', None)
    return video


def legacy_video_belongs_to(row: Dict[str, Any], course_id, course_name: str) -> bool:
    """Match by cid where migrated, by course title for rows that predate cid."""
    cid = row.get('cid')
    if cid is not None:
        return cid == course_id
    return bool(course_name) and row.get('course_title') == course_name


def merge_course_videos(course_id, course_name: str,
                        modern_rows: Iterable[Dict], legacy_rows: Iterable[Dict]) -> List[Dict]:
    """Modern videos first, then legacy title-keyed videos, each in id order."""
    merged = [normalize_video(row) for row in modern_rows if row.get('course_id') == course_id]
    merged.extend(
        normalize_legacy_video(row, course_id)
        for row in legacy_rows
        if legacy_video_belongs_to(row, course_id, course_name)
    )
    return merged


def normalize_course(row: Dict[str, Any], videos: List = None, quizzes: List = None) -> Dict[str, Any]:
    return {
        'id': row.get('id'),
        'name': course_display_name(row),
        'description': row.get('description') or '',
        'videos': list(videos or []),
        'quizzes': list(quizzes or []),
    }


# ============================================================================
# QUIZZES
# ============================================================================

def nest_quiz_questions(quizzes: Iterable[Dict], questions: Iterable[Dict]) -> List[Dict]:
    """Attach quiz_content rows to their quizes header, ordered by question_id."""
    by_quiz = {}
    for question in sorted(questions, key=lambda q: q.get('question_id') or 0):
        by_quiz.setdefault(question.get('qid'), []).append(dict(question))

    return [
        {**quiz, 'questions': by_quiz.get(quiz.get('qid'), [])}
        for quiz in quizzes
    ]


# ============================================================================
# ACCOUNTS
# ============================================================================

def sanitize_profile(row: Dict[str, Any]) -> Dict[str, Any]:
    """Profile without credentials; password fields blank for form binding"""
    return {
        'name': row.get('name') or '',
        'email': row.get('email') or '',
        'phone': row.get('phone') or '',
        'role': row.get('role') or 'Admin',
        'password': '',
        'confirm_password': '',
    }


def public_account(row: Dict[str, Any], fields=('id', 'name', 'email', 'phone', 'role')) -> Dict[str, Any]:
    return {key: row.get(key) for key in fields if key in row}
