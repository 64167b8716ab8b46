"""
GrowthMindz Admin - Dashboard Service
"""
from typing import Dict
from sqlalchemy import text

from .base import DatabaseService
from .account_service import AccountService
from .learner_service import LearnerService


class DashboardService(DatabaseService):
    """Headline counts for the admin dashboard"""

    def get_stats(self) -> Dict[str, int]:
        learners = LearnerService(self.engine, self.catalog)
        accounts = AccountService(self.engine, self.catalog)

        with self.engine.connect() as conn:
            courses = conn.execute(text("SELECT COUNT(*) FROM courses")).scalar() or 0

        return {
            'users': learners.count_learners(),
            'courses': int(courses),
            'staff': int(accounts.count_staff())
        }
