"""
JSON API for beds, plantings, tasks, journal entries, the profile and the
gardening advisor. Mounted under /api.
"""

from flask import Blueprint, abort, request

from verdant.domain.companions import resolve_companions
from verdant.forms import (
    BedForm,
    JournalEntryForm,
    PlantingForm,
    PlantingUpdateForm,
    ProfileForm,
    TaskForm,
    first_error,
    form_data,
    form_from_payload,
    submitted_data,
    validate_partial,
)
from verdant.services import garden
from verdant.utils.responses import bad, ok


api_bp = Blueprint('api', __name__)


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        abort(400, description='Request body must be a JSON object')
    return payload


def _validated(form_cls, payload):
    """Full validation; aborts with the first error message."""
    form = form_from_payload(form_cls, payload)
    if not form.validate():
        abort(400, description=first_error(form) or 'Invalid request')
    return form


def _validated_partial(form_cls, payload) -> dict:
    form = form_from_payload(form_cls, payload)
    data = submitted_data(form, payload)
    if not validate_partial(form, data.keys()):
        abort(400, description=first_error(form) or 'Invalid request')
    return data


# --- BEDS ---

@api_bp.route('/beds', methods=['GET'])
def list_beds():
    return ok([b.to_dict() for b in garden.list_beds()])


@api_bp.route('/beds', methods=['POST'])
def create_bed():
    form = _validated(BedForm, _json_body())
    bed = garden.create_bed(name=form.name.data, width=form.width.data, height=form.height.data)
    return ok(bed.to_dict())


@api_bp.route('/beds/<bed_id>', methods=['GET'])
def get_bed(bed_id):
    return ok(garden.get_bed(bed_id).to_dict())


@api_bp.route('/beds/<bed_id>', methods=['PUT'])
def update_bed(bed_id):
    form = _validated(BedForm, _json_body())
    bed = garden.update_bed(bed_id, name=form.name.data, width=form.width.data, height=form.height.data)
    return ok(bed.to_dict())


@api_bp.route('/beds/<bed_id>', methods=['DELETE'])
def delete_bed(bed_id):
    return ok(garden.delete_bed(bed_id))


# --- PLANTINGS ---

@api_bp.route('/plantings', methods=['GET'])
def list_plantings():
    bed_id = (request.args.get('bedId') or '').strip() or None
    return ok([p.to_dict() for p in garden.list_plantings(bed_id)])


@api_bp.route('/plantings', methods=['POST'])
def create_planting():
    form = _validated(PlantingForm, _json_body())
    planting = garden.create_planting(
        bed_id=form.bedId.data,
        crop_name=form.cropName.data,
        planting_date=form.plantingDate.data,
        notes=form.notes.data,
    )
    return ok(planting.to_dict())


@api_bp.route('/plantings/<planting_id>', methods=['PUT'])
def update_planting(planting_id):
    payload = _json_body()
    if 'harvestDate' in payload and payload['harvestDate'] is None:
        abort(400, description='Harvest date must be positive')
    data = _validated_partial(PlantingUpdateForm, payload)
    return ok(garden.update_planting(planting_id, data).to_dict())


@api_bp.route('/plantings/<planting_id>', methods=['DELETE'])
def delete_planting(planting_id):
    return ok({'id': planting_id, 'deleted': garden.delete_planting(planting_id)})


# --- TASKS ---

@api_bp.route('/tasks', methods=['GET'])
def list_tasks():
    return ok([t.to_dict() for t in garden.list_tasks()])


@api_bp.route('/tasks', methods=['POST'])
def create_task():
    form = _validated(TaskForm, _json_body())
    return ok(garden.create_task(form_data(form)).to_dict())


@api_bp.route('/tasks/<task_id>', methods=['PUT'])
def update_task(task_id):
    data = _validated_partial(TaskForm, _json_body())
    return ok(garden.update_task(task_id, data).to_dict())


@api_bp.route('/tasks/<task_id>', methods=['DELETE'])
def delete_task(task_id):
    return ok({'id': task_id, 'deleted': garden.delete_task(task_id)})


# --- JOURNAL ENTRIES ---

@api_bp.route('/journal', methods=['GET'])
def list_journal():
    return ok([e.to_dict() for e in garden.list_journal_entries()])


@api_bp.route('/journal', methods=['POST'])
def create_journal_entry():
    form = _validated(JournalEntryForm, _json_body())
    return ok(garden.create_journal_entry(form_data(form)).to_dict())


@api_bp.route('/journal/<entry_id>', methods=['PUT'])
def update_journal_entry(entry_id):
    data = _validated_partial(JournalEntryForm, _json_body())
    return ok(garden.update_journal_entry(entry_id, data).to_dict())


@api_bp.route('/journal/<entry_id>', methods=['DELETE'])
def delete_journal_entry(entry_id):
    return ok({'id': entry_id, 'deleted': garden.delete_journal_entry(entry_id)})


# --- USER PROFILE ---

@api_bp.route('/profile', methods=['GET'])
def get_profile():
    return ok(garden.get_profile().to_dict())


@api_bp.route('/profile', methods=['PUT'])
def update_profile():
    form = _validated(ProfileForm, _json_body())
    return ok(garden.update_profile(location=form.location.data).to_dict())


# --- ADVISOR & LOOKUPS ---

@api_bp.route('/advisor', methods=['GET'])
def advisor():
    return ok([a.as_dict() for a in garden.build_advice()])


@api_bp.route('/companions', methods=['GET'])
def companions():
    crop = (request.args.get('crop') or '').strip()
    if not crop:
        return bad('Crop name is required')
    return ok(resolve_companions(crop).as_dict())


@api_bp.route('/calendar', methods=['GET'])
def calendar_month():
    year, month = garden.parse_month(request.args.get('month'))
    events = garden.calendar_events(year, month)
    return ok({
        'month': f'{year:04d}-{month:02d}',
        'events': [e.as_dict() for e in events],
    })
