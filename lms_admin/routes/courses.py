"""
GrowthMindz Admin - Course Routes
Courses with their videos and quizzes, plus the title-keyed course videos
"""
from flask import Blueprint, jsonify, request
from ..middleware.auth_middleware import require_auth
from ..middleware.rbac_middleware import require_roles
from ..services import CourseService, CourseVideoService

courses_bp = Blueprint('courses', __name__)
course_videos_bp = Blueprint('course_videos', __name__)

ADMIN_AND_STAFF = ['Admin', 'Staff']


# ============================================================================
# COURSES
# ============================================================================

@courses_bp.route('', methods=['GET'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def list_courses():
    """Every course in one shape, with modern and legacy videos merged"""
    return jsonify(CourseService().list_courses())


@courses_bp.route('', methods=['POST'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def create_course():
    data = request.get_json(silent=True) or {}
    return jsonify(CourseService().create_course(data))


@courses_bp.route('/<int:course_id>', methods=['DELETE'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def delete_course(course_id):
    return jsonify(CourseService().delete_course(course_id))


@courses_bp.route('/<int:course_id>/videos', methods=['POST'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def add_course_video(course_id):
    data = request.get_json(silent=True) or {}
    return jsonify(CourseService().add_video(course_id, data))


@courses_bp.route('/<int:course_id>/quizzes', methods=['POST'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def add_course_quiz(course_id):
    """Single-question quiz stored in the legacy quizzes table"""
    data = request.get_json(silent=True) or {}
    return jsonify(CourseService().add_legacy_quiz(course_id, data))


# ============================================================================
# COURSE VIDEOS (title-keyed)
# ============================================================================

@course_videos_bp.route('', methods=['GET'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def list_course_videos():
    course_title = request.args.get('course_title', '')
    return jsonify(CourseVideoService().list_by_course_title(course_title))


@course_videos_bp.route('', methods=['POST'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def create_course_video():
    data = request.get_json(silent=True) or {}
    return jsonify(CourseVideoService().create_video(data))


@course_videos_bp.route('/<int:video_id>', methods=['PUT'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def update_course_video(video_id):
    data = request.get_json(silent=True) or {}
    return jsonify(CourseVideoService().update_video(video_id, data))


@course_videos_bp.route('/<int:video_id>', methods=['DELETE'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def delete_course_video(video_id):
    return jsonify(CourseVideoService().delete_video(video_id))
