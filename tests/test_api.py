"""JSON API: beds, plantings, tasks, journal, profile, advisor."""

from verdant.utils.timestamps import MS_PER_DAY, now_ms


def _data(resp):
    body = resp.get_json()
    assert body['success'] is True, body
    return body['data']


def _error(resp):
    body = resp.get_json()
    assert body['success'] is False
    return body['error']


# --- beds ---

def test_create_and_list_beds(client, bed):
    assert bed['name'] == 'North Bed'
    assert bed['width'] == 4
    assert bed['height'] == 8
    assert bed['id']
    assert bed['createdAt'] > 0

    listed = _data(client.get('/api/beds'))
    assert [b['id'] for b in listed] == [bed['id']]


def test_create_bed_validation(client):
    resp = client.post('/api/beds', json={'name': '', 'width': 1, 'height': 1})
    assert resp.status_code == 400
    assert _error(resp) == 'Name is required'

    resp = client.post('/api/beds', json={'name': 'Bed', 'width': 0, 'height': 1})
    assert resp.status_code == 400
    assert _error(resp) == 'Width must be positive'

    resp = client.post('/api/beds', json={'name': 'Bed', 'width': 2, 'height': -1})
    assert _error(resp) == 'Height must be positive'


def test_non_json_body_rejected(client):
    resp = client.post('/api/beds', data='nope', content_type='application/json')
    assert resp.status_code == 400
    assert _error(resp) == 'Request body must be a JSON object'


def test_get_update_missing_bed(client):
    resp = client.get('/api/beds/does-not-exist')
    assert resp.status_code == 404
    assert _error(resp) == 'Bed not found'

    resp = client.put('/api/beds/does-not-exist', json={'name': 'X', 'width': 1, 'height': 1})
    assert resp.status_code == 404


def test_update_bed(client, bed):
    updated = _data(client.put(f"/api/beds/{bed['id']}", json={'name': 'South Bed', 'width': 2, 'height': 3}))
    assert updated['name'] == 'South Bed'
    assert updated['createdAt'] == bed['createdAt']
    assert _data(client.get(f"/api/beds/{bed['id']}"))['width'] == 2


def test_delete_bed_cascades(client, bed):
    other = _data(client.post('/api/beds', json={'name': 'Other', 'width': 1, 'height': 1}))
    today = now_ms()
    client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': 'Tomato', 'plantingDate': today})
    keep = _data(client.post('/api/plantings', json={'bedId': other['id'], 'cropName': 'Kale', 'plantingDate': today}))
    client.post('/api/tasks', json={'title': 'Weed', 'dueDate': today, 'bedId': bed['id']})
    loose = _data(client.post('/api/tasks', json={'title': 'Buy seeds', 'dueDate': today}))

    assert _data(client.delete(f"/api/beds/{bed['id']}")) == {'id': bed['id'], 'deleted': True}

    assert [p['id'] for p in _data(client.get('/api/plantings'))] == [keep['id']]
    assert [t['id'] for t in _data(client.get('/api/tasks'))] == [loose['id']]
    assert client.get(f"/api/beds/{bed['id']}").status_code == 404


# --- plantings ---

def test_create_planting_stores_companions(client, bed):
    planting = _data(client.post('/api/plantings', json={
        'bedId': bed['id'],
        'cropName': 'Cherry Tomato',
        'plantingDate': now_ms(),
        'notes': 'Started indoors',
    }))
    assert planting['companionPlants'] == {
        'good': ['Basil', 'Carrots', 'Marigolds', 'Onions', 'Lettuce'],
        'bad': ['Cabbage', 'Corn', 'Fennel', 'Potatoes'],
    }
    assert planting['notes'] == 'Started indoors'
    assert 'harvestDate' not in planting


def test_unknown_crop_gets_default_companions(client, bed):
    planting = _data(client.post('/api/plantings', json={
        'bedId': bed['id'], 'cropName': 'Okra', 'plantingDate': now_ms(),
    }))
    assert planting['companionPlants']['bad'] == ['Fennel (inhibits growth)']


def test_create_planting_requires_existing_bed(client):
    resp = client.post('/api/plantings', json={'bedId': 'ghost', 'cropName': 'Kale', 'plantingDate': now_ms()})
    assert resp.status_code == 400
    assert _error(resp) == 'Associated bed not found'


def test_create_planting_validation(client, bed):
    resp = client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': '', 'plantingDate': now_ms()})
    assert _error(resp) == 'Crop name is required'
    resp = client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': 'Kale'})
    assert _error(resp) == 'Planting date is required'


def test_filter_plantings_by_bed(client, bed):
    other = _data(client.post('/api/beds', json={'name': 'Other', 'width': 1, 'height': 1}))
    client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': 'Kale', 'plantingDate': now_ms()})
    client.post('/api/plantings', json={'bedId': other['id'], 'cropName': 'Corn', 'plantingDate': now_ms()})

    only = _data(client.get(f"/api/plantings?bedId={other['id']}"))
    assert [p['cropName'] for p in only] == ['Corn']
    assert len(_data(client.get('/api/plantings'))) == 2


def test_harvest_and_delete_planting(client, bed):
    planting = _data(client.post('/api/plantings', json={
        'bedId': bed['id'], 'cropName': 'Radish', 'plantingDate': now_ms() - 30 * MS_PER_DAY,
    }))
    harvest = now_ms()
    updated = _data(client.put(f"/api/plantings/{planting['id']}", json={'harvestDate': harvest}))
    assert updated['harvestDate'] == harvest

    assert _data(client.delete(f"/api/plantings/{planting['id']}")) == {'id': planting['id'], 'deleted': True}
    assert _data(client.delete(f"/api/plantings/{planting['id']}")) == {'id': planting['id'], 'deleted': False}


def test_update_missing_planting(client):
    resp = client.put('/api/plantings/ghost', json={'harvestDate': now_ms()})
    assert resp.status_code == 404
    assert _error(resp) == 'Planting not found'


# --- tasks ---

def test_task_lifecycle(client, bed):
    due = now_ms() + MS_PER_DAY
    task = _data(client.post('/api/tasks', json={'title': 'Mulch', 'dueDate': due, 'bedId': bed['id']}))
    assert task['completed'] is False
    assert task['bedId'] == bed['id']

    done = _data(client.put(f"/api/tasks/{task['id']}", json={'completed': True}))
    assert done['completed'] is True
    assert done['title'] == 'Mulch'
    assert done['dueDate'] == due

    resp = client.put(f"/api/tasks/{task['id']}", json={'title': ''})
    assert resp.status_code == 400
    assert _error(resp) == 'Title is required'

    assert _data(client.delete(f"/api/tasks/{task['id']}"))['deleted'] is True
    assert _data(client.get('/api/tasks')) == []


def test_task_validation_and_missing(client):
    resp = client.post('/api/tasks', json={'dueDate': now_ms()})
    assert _error(resp) == 'Title is required'

    resp = client.put('/api/tasks/ghost', json={'completed': True})
    assert resp.status_code == 404
    assert _error(resp) == 'Task not found'


# --- journal ---

def test_journal_lifecycle(client):
    entry = _data(client.post('/api/journal', json={
        'date': now_ms(), 'notes': 'Aphids on the kale', 'tags': ['pests', 'kale'],
    }))
    assert entry['tags'] == ['pests', 'kale']

    edited = _data(client.put(f"/api/journal/{entry['id']}", json={'notes': 'Ladybugs arrived'}))
    assert edited['notes'] == 'Ladybugs arrived'
    assert edited['tags'] == ['pests', 'kale']

    assert _data(client.delete(f"/api/journal/{entry['id']}"))['deleted'] is True


def test_journal_validation(client):
    resp = client.post('/api/journal', json={'date': now_ms(), 'notes': ''})
    assert _error(resp) == 'Notes are required'
    resp = client.put('/api/journal/ghost', json={'notes': 'x'})
    assert resp.status_code == 404
    assert _error(resp) == 'Journal entry not found'


# --- profile & advisor ---

def test_profile_created_on_first_read(client):
    assert _data(client.get('/api/profile')) == {'id': 'main', 'location': ''}


def test_update_profile(client):
    assert _data(client.put('/api/profile', json={'location': 'Austin, TX'}))['location'] == 'Austin, TX'
    assert _data(client.get('/api/profile'))['location'] == 'Austin, TX'

    resp = client.put('/api/profile', json={'location': 'X'})
    assert resp.status_code == 400
    assert _error(resp) == 'Location is required'


def test_advisor_for_empty_garden(client):
    advice = _data(client.get('/api/advisor'))
    assert [a['id'] for a in advice] == ['set-location', 'general-tip']


def test_advisor_scenario(client, bed):
    client.put('/api/profile', json={'location': 'Austin, TX'})
    today = now_ms()
    client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': 'Tomato', 'plantingDate': today})
    client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': 'Potato', 'plantingDate': today - 30 * MS_PER_DAY})

    advice = _data(client.get('/api/advisor'))
    assert [a['id'] for a in advice] == ['young-seedlings', 'rotate-nightshade']
    assert 'You have 1 new planting(s).' in advice[0]['message']


# --- lookups ---

def test_companions_lookup(client):
    data = _data(client.get('/api/companions?crop=Sweet%20Corn'))
    assert data == {'good': ['Beans', 'Cucumbers', 'Peas', 'Squash'], 'bad': ['Tomatoes']}
    assert client.get('/api/companions').status_code == 400


def test_calendar_month(client, bed):
    client.post('/api/plantings', json={'bedId': bed['id'], 'cropName': 'Kale', 'plantingDate': 1780272000000})
    client.post('/api/tasks', json={'title': 'Thin kale', 'dueDate': 1780272000000 + 5 * MS_PER_DAY})
    client.post('/api/tasks', json={'title': 'Next month', 'dueDate': 1780272000000 + 40 * MS_PER_DAY})

    data = _data(client.get('/api/calendar?month=2026-06'))
    assert data['month'] == '2026-06'
    assert [(e['type'], e['data'].get('cropName') or e['data'].get('title')) for e in data['events']] == [
        ('planting', 'Kale'),
        ('task', 'Thin kale'),
    ]


def test_calendar_bad_month(client):
    resp = client.get('/api/calendar?month=June')
    assert resp.status_code == 400
    assert _error(resp) == 'Month must be formatted as YYYY-MM'


def test_unknown_api_route_is_json(client):
    resp = client.get('/api/nothing-here')
    assert resp.status_code == 404
    assert resp.get_json()['success'] is False


def test_calendar_rejects_years_past_the_last_full_month(client):
    resp = client.get('/api/calendar?month=9999-12')
    assert resp.status_code == 400
    assert _error(resp) == 'Year must be between 1 and 9998'

    data = _data(client.get('/api/calendar?month=9998-12'))
    assert data == {'month': '9998-12', 'events': []}


# --- numeric edge cases ---

def test_non_finite_bed_dimensions_rejected(client):
    resp = client.post('/api/beds', data='{"name": "Bed", "width": NaN, "height": 1}',
                       content_type='application/json')
    assert resp.status_code == 400
    assert _error(resp) == 'Width must be positive'

    resp = client.post('/api/beds', data='{"name": "Bed", "width": 1, "height": Infinity}',
                       content_type='application/json')
    assert resp.status_code == 400
    assert _error(resp) == 'Height must be positive'
    assert _data(client.get('/api/beds')) == []


def test_non_finite_planting_date_rejected(client, bed):
    resp = client.post(
        '/api/plantings',
        data='{"bedId": "%s", "cropName": "Kale", "plantingDate": Infinity}' % bed['id'],
        content_type='application/json',
    )
    assert resp.status_code == 400
    assert _data(client.get('/api/plantings')) == []


def test_null_harvest_date_rejected(client, bed):
    planting = _data(client.post('/api/plantings', json={
        'bedId': bed['id'], 'cropName': 'Beet', 'plantingDate': now_ms() - 40 * MS_PER_DAY,
    }))
    harvest = now_ms()
    client.put(f"/api/plantings/{planting['id']}", json={'harvestDate': harvest})

    resp = client.put(f"/api/plantings/{planting['id']}", json={'harvestDate': None})
    assert resp.status_code == 400
    assert _error(resp) == 'Harvest date must be positive'
    stored = _data(client.get(f"/api/plantings?bedId={bed['id']}"))[0]
    assert stored['harvestDate'] == harvest
