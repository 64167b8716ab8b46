"""
GrowthMindz Admin - Normalizer Tests
"""
from decimal import Decimal

import pytest

from lms_admin.utils.normalizers import (
    NO_COURSE,
    coerce_progress,
    merge_course_videos,
    nest_quiz_questions,
    normalize_course,
    normalize_learner,
    resolve_progress,
    round_progress_average,
    sanitize_profile,
)


class TestProgressCoercion:

    @pytest.mark.parametrize('stored, expected', [
        ('42', 42),
        (42, 42),
        (42.0, 42),
        ('0', 0),
        ('150', 100),
        (' 7 ', 7),
    ])
    def test_well_formed_values(self, stored, expected):
        assert coerce_progress(stored) == expected

    @pytest.mark.parametrize('stored', ['abc', '', '-5', '4.5', 42.5, Decimal('42.5'), None, True])
    def test_malformed_values_are_absent(self, stored):
        assert coerce_progress(stored) is None

    def test_non_numeric_string_falls_back_to_zero(self):
        assert resolve_progress('abc') == 0

    def test_non_numeric_string_falls_back_to_average(self):
        assert resolve_progress('abc', average=Decimal('66.5')) == 67

    def test_stored_value_wins_over_average(self):
        assert resolve_progress('10', average=90) == 10

    def test_average_rounds_half_up(self):
        assert round_progress_average(2.5) == 3
        assert round_progress_average(2.49) == 2
        assert round_progress_average(None) is None


class TestLearnerNormalization:

    def test_defaults_when_no_course_or_progress(self):
        learner = normalize_learner({'id': 3, 'first_name': None, 'last_name': None, 'email': 'l@x.com'})

        assert learner == {
            'id': 3,
            'first_name': '',
            'last_name': '',
            'email': 'l@x.com',
            'course_opted': NO_COURSE,
            'progress': 0,
        }

    def test_joined_course_title_used_when_column_empty(self):
        learner = normalize_learner({
            'id': 1, 'email': 'a@x.com', 'course_opted': None,
            'course_title': 'Python Basics', 'progress': 'abc', 'progress_avg': 40.5
        })

        assert learner['course_opted'] == 'Python Basics'
        assert learner['progress'] == 41


class TestCourseNormalization:

    def test_name_from_legacy_column(self):
        course = normalize_course({'id': 1, 'name': 'Legacy', 'description': None})

        assert course == {'id': 1, 'name': 'Legacy', 'description': '', 'videos': [], 'quizzes': []}

    def test_video_union_keeps_modern_first(self):
        modern = [
            {'id': 1, 'course_id': 7, 'title': 'M1', 'video_url': 'http://m/1'},
            {'id': 2, 'course_id': 7, 'title': 'M2', 'video_url': None},
            {'id': 3, 'course_id': 8, 'title': 'Other', 'video_url': 'http://m/3'},
        ]
        legacy = [
            {'id': 10, 'course_vedio_title': 'L1', 'vedio_url': 'http://l/1', 'cid': 7},
            {'id': 11, 'course_vedio_title': 'L2', 'vedio_url': 'http://l/2', 'cid': None,
             'course_title': 'Python Basics'},
            {'id': 12, 'course_vedio_title': 'L3', 'vedio_url': 'http://l/3',
             'course_title': 'Python Basics'},
            {'id': 13, 'course_vedio_title': 'Elsewhere', 'vedio_url': 'http://l/4', 'cid': 8,
             'course_title': 'Python Basics'},
        ]

        videos = merge_course_videos(7, 'Python Basics', modern, legacy)

        assert [v['title'] for v in videos] == ['M1', 'M2', 'L1', 'L2', 'L3']
        assert all('video_url' in v for v in videos)
        assert videos[1]['video_url'] == ''
        assert videos[2]['video_url'] == 'http://l/1'
        assert [v.get('source') for v in videos[2:]] == ['courses_vedio'] * 3
        assert all(v['course_id'] == 7 for v in videos)


class TestQuizNesting:

    def test_questions_nested_in_question_order(self):
        quizzes = [{'qid': 1, 'quiz_title': 'A'}, {'qid': 2, 'quiz_title': 'B'}]
        questions = [
            {'question_id': 5, 'qid': 1, 'question': 'second'},
            {'question_id': 3, 'qid': 1, 'question': 'first'},
            {'question_id': 4, 'qid': 9, 'question': 'orphan'},
        ]

        nested = nest_quiz_questions(quizzes, questions)

        assert [q['question'] for q in nested[0]['questions']] == ['first', 'second']
        assert nested[1]['questions'] == []


def test_profile_is_sanitized():
    profile = sanitize_profile({'id': 1, 'name': 'Asha', 'email': 'a@x.com',
                                'phone': None, 'role': 'Staff', 'password': '$2b$secret'})

    assert profile == {
        'name': 'Asha',
        'email': 'a@x.com',
        'phone': '',
        'role': 'Staff',
        'password': '',
        'confirm_password': '',
    }
