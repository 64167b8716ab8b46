"""
GrowthMindz Admin - Services
Service layer over the shared engine and schema catalog
"""
from .base import DatabaseService
from .auth_service import AuthService
from .account_service import AccountService
from .learner_service import LearnerService
from .dashboard_service import DashboardService
from .course_service import CourseService
from .course_video_service import CourseVideoService
from .quiz_service import QuizService

__all__ = [
    'DatabaseService',
    'AuthService',
    'AccountService',
    'LearnerService',
    'DashboardService',
    'CourseService',
    'CourseVideoService',
    'QuizService'
]
