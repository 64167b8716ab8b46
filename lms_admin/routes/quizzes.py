"""
GrowthMindz Admin - Quiz Routes
Normalized quizzes; every write is a single transaction
"""
from flask import Blueprint, jsonify, request
from ..middleware.auth_middleware import require_auth
from ..middleware.rbac_middleware import require_roles
from ..services import QuizService

quizzes_bp = Blueprint('quizzes', __name__)

ADMIN_AND_STAFF = ['Admin', 'Staff']


@quizzes_bp.route('', methods=['POST'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def create_quiz():
    data = request.get_json(silent=True) or {}
    return jsonify(QuizService().create_quiz(data))


@quizzes_bp.route('/<int:cid>', methods=['GET'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def list_course_quizzes(cid):
    """Quizzes of course cid with their questions nested"""
    return jsonify(QuizService().list_for_course(cid))


@quizzes_bp.route('/<int:qid>', methods=['PUT'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def update_quiz(qid):
    data = request.get_json(silent=True) or {}
    return jsonify(QuizService().update_quiz(qid, data))


@quizzes_bp.route('/<int:qid>', methods=['DELETE'])
@require_auth
@require_roles(ADMIN_AND_STAFF)
def delete_quiz(qid):
    return jsonify(QuizService().delete_quiz(qid))
