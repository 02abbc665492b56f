import pytest

from data.seed_data import DEFAULT_SETTINGS, DEFAULT_SUBJECTS


@pytest.fixture
def seeded(client):
    client.put('/api/settings/', json=DEFAULT_SETTINGS)
    for subject in DEFAULT_SUBJECTS:
        client.post('/api/subjects/', json=subject)
    return client


def test_index_and_health(client):
    assert client.get('/').get_json()['endpoints']['generate'] == '/api/timetables/generate'

    health = client.get('/api/health').get_json()
    assert health == {'status': 'ok', 'subjects': 0, 'settings_configured': False,
                      'saved_timetables': 0}


def test_unknown_route_returns_json_404(client):
    response = client.get('/api/subjects/999')
    assert response.status_code == 404
    assert response.get_json() == {'error': 'Not found'}


def test_subject_crud(client):
    response = client.post('/api/subjects/', json={'name': 'Maths', 'code': 'MATH',
                                                   'teacher': 'Mr. Johnson', 'periods_per_week': 4})
    assert response.status_code == 201
    subject = response.get_json()
    assert subject['color'] == '#3B82F6'

    listing = client.get('/api/subjects/').get_json()
    assert listing['count'] == 1
    assert listing['total_periods'] == 4

    updated = client.put(f"/api/subjects/{subject['id']}", json={'periods_per_week': 6}).get_json()
    assert updated['periods_per_week'] == 6
    assert updated['name'] == 'Maths'

    assert client.delete(f"/api/subjects/{subject['id']}").get_json() == {'success': True}
    assert client.get(f"/api/subjects/{subject['id']}").status_code == 404


@pytest.mark.parametrize('payload', [
    {'name': '', 'periods_per_week': 2},
    {'name': 'Maths'},
    {'name': 'Maths', 'duration': -30},
])
def test_invalid_subject_rejected(client, payload):
    response = client.post('/api/subjects/', json=payload)
    assert response.status_code == 400
    assert 'error' in response.get_json()
    assert client.get('/api/subjects/').get_json()['count'] == 0


def test_invalid_subject_update_keeps_record(client):
    subject = client.post('/api/subjects/', json={'name': 'Maths', 'periods_per_week': 4}).get_json()
    assert client.put(f"/api/subjects/{subject['id']}", json={'periods_per_week': -1}).status_code == 400
    assert client.get(f"/api/subjects/{subject['id']}").get_json()['periods_per_week'] == 4


def test_settings_create_then_update(client):
    assert client.get('/api/settings/').status_code == 404

    response = client.put('/api/settings/', json=dict(DEFAULT_SETTINGS, start_time='8:00'))
    assert response.status_code == 201
    assert response.get_json()['start_time'] == '08:00'

    response = client.put('/api/settings/', json={'period_duration': 60})
    assert response.status_code == 200
    settings = client.get('/api/settings/').get_json()
    assert settings['period_duration'] == 60
    assert settings['working_days'] == DEFAULT_SETTINGS['working_days']


@pytest.mark.parametrize('payload', [
    {'end_time': '07:00'},
    {'lunch_time': 'noon'},
    {'working_days': []},
    {'schedule_type': 'monthly'},
])
def test_invalid_settings_rejected(client, payload):
    client.put('/api/settings/', json=DEFAULT_SETTINGS)
    response = client.put('/api/settings/', json=payload)
    assert response.status_code == 400
    assert client.get('/api/settings/').get_json()['end_time'] == '16:00'


def test_constraint_crud(client):
    subject = client.post('/api/subjects/', json={'name': 'Maths', 'periods_per_week': 4}).get_json()

    response = client.post('/api/constraints/', json={
        'subject_id': subject['id'],
        'avoid_consecutive': True,
        'unavailable_slots': [{'day': 'Monday', 'time': '9:00'}],
    })
    assert response.status_code == 201
    constraint = response.get_json()
    assert constraint['unavailable_slots'] == [{'day': 'Monday', 'time': '09:00'}]
    assert constraint['prefer_morning'] is False

    updated = client.put(f"/api/constraints/{constraint['id']}", json={'prefer_morning': True})
    assert updated.get_json()['prefer_morning'] is True

    assert len(client.get('/api/constraints/').get_json()['constraints']) == 1
    assert client.delete(f"/api/constraints/{constraint['id']}").get_json() == {'success': True}
    assert client.get('/api/constraints/').get_json()['constraints'] == []


def test_constraint_validation(client):
    assert client.post('/api/constraints/', json={'avoid_consecutive': True}).status_code == 400
    assert client.post('/api/constraints/', json={'subject_id': 42}).status_code == 404
    response = client.post('/api/constraints/', json={
        'teacher': 'Mr. Johnson', 'unavailable_slots': [{'day': 'Monday'}],
    })
    assert response.status_code == 400
    response = client.post('/api/constraints/', json={
        'teacher': 'Mr. Johnson', 'unavailable_slots': [{'day': 'Monday', 'time': '25'}],
    })
    assert response.status_code == 400


def test_generate_requires_settings_and_subjects(client):
    response = client.post('/api/timetables/generate', json={})
    assert response.status_code == 400
    assert 'settings' in response.get_json()['error']

    client.put('/api/settings/', json=DEFAULT_SETTINGS)
    response = client.post('/api/timetables/generate', json={})
    assert response.status_code == 400
    assert 'subject' in response.get_json()['error']


def test_generate_default_week(seeded):
    response = seeded.post('/api/timetables/generate', json={})
    assert response.status_code == 200
    body = response.get_json()

    assert body['success'] is True
    assert body['warnings'] == []
    assert 'saved' not in body
    timetable = body['timetable']
    assert [day['day'] for day in timetable['days']] == DEFAULT_SETTINGS['working_days']
    assert timetable['strategy'] == 'quota'
    assert timetable['statistics']['total_classes'] == 45

    monday = timetable['days'][0]['entries']
    fixed = [(e['type'], e['time']['start'], e['subject']['name']) for e in monday if e['type'] != 'class']
    assert fixed == [('break', '10:30', 'Morning Break'), ('lunch', '12:30', 'Lunch Break')]


def test_generate_rejects_unknown_strategy(seeded):
    response = seeded.post('/api/timetables/generate', json={'strategy': 'random'})
    assert response.status_code == 400


def test_generate_with_seed_is_repeatable(seeded):
    seeded.post('/api/constraints/', json={'subject_id': 1, 'avoid_consecutive': True})
    first = seeded.post('/api/timetables/generate', json={'seed': 3}).get_json()
    second = seeded.post('/api/timetables/generate', json={'seed': 3}).get_json()
    assert first['timetable'] == second['timetable']


def test_generate_and_save(seeded):
    response = seeded.post('/api/timetables/generate', json={'save': True, 'name': 'Term 1'})
    assert response.status_code == 201
    saved = response.get_json()['saved']
    assert saved['name'] == 'Term 1'

    listing = seeded.get('/api/timetables/').get_json()['timetables']
    assert [t['id'] for t in listing] == [saved['id']]
    assert seeded.get('/api/health').get_json()['saved_timetables'] == 1


def test_saved_timetable_crud(seeded):
    generated = seeded.post('/api/timetables/generate', json={}).get_json()

    assert seeded.post('/api/timetables/', json={'timetable': generated['timetable']}).status_code == 400
    assert seeded.post('/api/timetables/', json={'name': 'Bad', 'timetable': {'x': 1}}).status_code == 400

    response = seeded.post('/api/timetables/', json={'name': 'Draft', 'timetable': generated['timetable']})
    assert response.status_code == 201
    saved = response.get_json()

    renamed = seeded.put(f"/api/timetables/{saved['id']}", json={'name': 'Final'}).get_json()
    assert renamed['name'] == 'Final'
    assert renamed['timetable'] == generated['timetable']
    assert seeded.put(f"/api/timetables/{saved['id']}", json={'name': ''}).status_code == 400

    assert seeded.delete(f"/api/timetables/{saved['id']}").status_code == 204
    assert seeded.get(f"/api/timetables/{saved['id']}").status_code == 404


def test_export_saved_timetable_as_csv(seeded):
    saved = seeded.post('/api/timetables/generate', json={'save': True, 'name': 'Week'}).get_json()['saved']

    response = seeded.get(f"/api/timetables/{saved['id']}/export")
    assert response.status_code == 200
    assert response.mimetype == 'text/csv'
    assert f"timetable-{saved['id']}.csv" in response.headers['Content-Disposition']

    lines = response.get_data(as_text=True).splitlines()
    assert lines[0] == 'Time,Monday,Tuesday,Wednesday,Thursday,Friday'
    assert lines[1].startswith('08:00-08:45,')
    assert '10:30-10:45,Morning Break,Morning Break,Morning Break,Morning Break,Morning Break' in lines
    # 9 teaching periods plus break and lunch per day
    assert len(lines) == 12

    assert seeded.get('/api/timetables/999/export').status_code == 404


def test_constraint_update_cannot_clear_its_target(client):
    constraint = client.post('/api/constraints/', json={'teacher': 'Mr. Davis',
                                                        'prefer_morning': True}).get_json()

    response = client.put(f"/api/constraints/{constraint['id']}", json={'teacher': ''})
    assert response.status_code == 400
    assert client.get(f"/api/constraints/{constraint['id']}").get_json()['teacher'] == 'Mr. Davis'

    subject = client.post('/api/subjects/', json={'name': 'Maths', 'periods_per_week': 4}).get_json()
    moved = client.put(f"/api/constraints/{constraint['id']}",
                       json={'teacher': None, 'subject_id': subject['id']})
    assert moved.status_code == 200
    assert moved.get_json()['subject_id'] == subject['id']


def test_generate_duration_strategy_leaves_out_zero_quota_subjects(client):
    client.put('/api/settings/', json=DEFAULT_SETTINGS)
    client.post('/api/subjects/', json={'name': 'Drama', 'periods_per_week': 0, 'duration': 60})
    client.post('/api/subjects/', json={'name': 'Music', 'duration': 60})

    body = client.post('/api/timetables/generate', json={'strategy': 'duration'}).get_json()
    names = {entry['subject']['name'] for day in body['timetable']['days']
             for entry in day['entries'] if entry['type'] == 'class'}
    assert names == {'Music'}
