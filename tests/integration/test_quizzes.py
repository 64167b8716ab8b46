"""
GrowthMindz Admin - Quiz Tests
Quiz writes are all-or-nothing
"""
from sqlalchemy import text


def _question(text_, answer='a', **overrides):
    question = {
        'question': text_, 'option_a': '1', 'option_b': '2',
        'option_c': '3', 'option_d': '4', 'correct_answer': answer
    }
    question.update(overrides)
    return question


def _counts(engine):
    with engine.connect() as conn:
        return (
            conn.execute(text("SELECT COUNT(*) FROM quizes")).scalar(),
            conn.execute(text("SELECT COUNT(*) FROM quiz_content")).scalar(),
        )


def _create(client, headers, cid, title='Unit 1', questions=None):
    response = client.post('/api/quizzes', headers=headers, json={
        'cid': cid, 'quiz_title': title,
        'questions': questions or [_question('q1'), _question('q2')]
    })
    assert response.status_code == 200
    return response.get_json()['quiz']


class TestCreateQuiz:

    def test_create_then_list_for_course(self, client, course, admin_headers):
        response = client.post('/api/quizzes', headers=admin_headers, json={
            'cid': course,
            'quiz_title': 'Unit 1',
            'questions': [{
                'question': '2+2?', 'option_a': '3', 'option_b': '4',
                'option_c': '5', 'option_d': '6', 'correct_answer': 'b'
            }]
        })

        assert response.status_code == 200
        quiz = response.get_json()['quiz']
        assert quiz['questions'][0]['correct_answer'] == 'b'
        assert quiz['cid'] == course

        listed = client.get(f'/api/quizzes/{course}', headers=admin_headers)
        assert listed.status_code == 200
        quizzes = listed.get_json()
        assert len(quizzes) == 1
        assert quizzes[0]['cid'] == course
        assert quizzes[0]['quiz_title'] == 'Unit 1'
        assert quizzes[0]['questions'][0]['question'] == '2+2?'

    def test_single_question_fields_accepted(self, client, course, staff_headers):
        response = client.post('/api/quizzes', headers=staff_headers, json={
            'cid': course, 'quiz_title': 'Solo', **_question('only one', answer='d')
        })

        assert response.status_code == 200
        assert len(response.get_json()['quiz']['questions']) == 1

    def test_invalid_question_rolls_back_everything(self, client, engine, course, admin_headers):
        response = client.post('/api/quizzes', headers=admin_headers, json={
            'cid': course,
            'quiz_title': 'Broken',
            'questions': [_question('fine'), _question('broken', option_c=''), _question('never')]
        })

        assert response.status_code == 400
        assert _counts(engine) == (0, 0)

    def test_requires_title_and_questions(self, client, course, admin_headers):
        response = client.post('/api/quizzes', headers=admin_headers, json={'cid': course, 'quiz_title': 'Empty'})

        assert response.status_code == 400
        assert response.get_json()['error'] == 'cid, quiz_title and at least one question are required'

    def test_unknown_course_is_404(self, client, engine, admin_headers):
        response = client.post('/api/quizzes', headers=admin_headers, json={
            'cid': 999, 'quiz_title': 'Orphan', 'questions': [_question('q')]
        })

        assert response.status_code == 404
        assert _counts(engine) == (0, 0)

    def test_empty_course_lists_nothing(self, client, course, admin_headers):
        assert client.get(f'/api/quizzes/{course}', headers=admin_headers).get_json() == []


class TestUpdateQuiz:

    def test_header_deletions_and_upserts(self, client, course, admin_headers):
        quiz = _create(client, admin_headers, course)
        first, second = quiz['questions']

        response = client.put(f"/api/quizzes/{quiz['qid']}", headers=admin_headers, json={
            'quiz_title': 'Unit 1 (revised)',
            'deleted_question_ids': [second['question_id']],
            'questions': [
                {'question_id': first['question_id'], 'correct_answer': 'c'},
                _question('q3', answer='d'),
            ]
        })

        assert response.status_code == 200
        updated = response.get_json()['quiz']
        assert updated['quiz_title'] == 'Unit 1 (revised)'
        assert [q['question'] for q in updated['questions']] == ['q1', 'q3']
        assert updated['questions'][0]['correct_answer'] == 'c'

    def test_incomplete_new_question_rolls_back(self, client, engine, course, admin_headers):
        quiz = _create(client, admin_headers, course)

        response = client.put(f"/api/quizzes/{quiz['qid']}", headers=admin_headers, json={
            'quiz_title': 'Should not stick',
            'deleted_question_ids': [quiz['questions'][0]['question_id']],
            'questions': [{'question': 'half a question'}]
        })

        assert response.status_code == 400
        assert response.get_json()['error'] == 'New questions require all fields'
        listed = client.get(f'/api/quizzes/{course}', headers=admin_headers).get_json()
        assert listed[0]['quiz_title'] == 'Unit 1'
        assert len(listed[0]['questions']) == 2

    def test_non_string_title_is_rejected(self, client, course, admin_headers):
        quiz = _create(client, admin_headers, course)

        response = client.put(f"/api/quizzes/{quiz['qid']}", headers=admin_headers, json={
            'quiz_title': ['Unit 1'],
            'deleted_question_ids': [quiz['questions'][0]['question_id']]
        })

        assert response.status_code == 400
        listed = client.get(f'/api/quizzes/{course}', headers=admin_headers).get_json()
        assert listed[0]['quiz_title'] == 'Unit 1'
        assert len(listed[0]['questions']) == 2

    def test_missing_quiz_is_404(self, client, admin_headers):
        response = client.put('/api/quizzes/999', headers=admin_headers, json={'quiz_title': 'x'})
        assert response.status_code == 404


class TestDeleteQuiz:

    def test_delete_removes_questions(self, client, engine, course, admin_headers):
        quiz = _create(client, admin_headers, course)

        response = client.delete(f"/api/quizzes/{quiz['qid']}", headers=admin_headers)

        assert response.status_code == 200
        assert _counts(engine) == (0, 0)
        assert client.delete(f"/api/quizzes/{quiz['qid']}", headers=admin_headers).status_code == 404
