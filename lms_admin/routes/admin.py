"""
GrowthMindz Admin - Dashboard & Learner Routes
"""
from flask import Blueprint, jsonify
from ..middleware.auth_middleware import require_auth
from ..middleware.rbac_middleware import require_roles
from ..services import DashboardService, LearnerService

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/dashboard/stats', methods=['GET'])
@require_auth
@require_roles(['Admin', 'Staff'])
def get_dashboard_stats():
    """Learner, course and staff counts"""
    return jsonify(DashboardService().get_stats())


@admin_bp.route('/users', methods=['GET'])
@require_auth
@require_roles(['Admin', 'Staff'])
def list_users():
    return jsonify(LearnerService().list_learners())
