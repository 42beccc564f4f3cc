"""Garden storage operations.

Thin layer between the HTTP routes and the models: CRUD for beds, plantings,
tasks and journal entries, the singleton profile, and the read-only views
(advice, calendar) built from them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from flask import current_app
from werkzeug.exceptions import BadRequest, NotFound

from verdant.domain.advisor import Advice, get_gardening_advice
from verdant.domain.companions import resolve_companions
from verdant.extensions import db
from verdant.models import Bed, JournalEntry, Planting, Task, UserProfile, new_id
from verdant.utils.db_resilience import with_db_resilience
from verdant.utils.timestamps import now_ms, to_datetime, to_ms


logger = logging.getLogger(__name__)

# camelCase API field -> model attribute
_TASK_FIELDS = {
    'title': 'title',
    'dueDate': 'due_date',
    'completed': 'completed',
    'bedId': 'bed_id',
    'plantingId': 'planting_id',
    'notes': 'notes',
}
_JOURNAL_FIELDS = {
    'date': 'date',
    'notes': 'notes',
    'bedId': 'bed_id',
    'plantingId': 'planting_id',
    'tags': 'tags',
}


def _apply(obj, data: dict, mapping: dict) -> None:
    for key, value in data.items():
        attr = mapping.get(key)
        if attr is None:
            continue
        setattr(obj, attr, None if value == '' else value)


def _require_bed(bed_id: Optional[str]) -> None:
    if bed_id and db.session.get(Bed, bed_id) is None:
        raise BadRequest('Associated bed not found')


# --- beds -------------------------------------------------------------------

@with_db_resilience()
def list_beds() -> List[Bed]:
    return Bed.query.order_by(Bed.created_at.asc()).all()


def get_bed(bed_id: str) -> Bed:
    bed = db.session.get(Bed, bed_id)
    if bed is None:
        raise NotFound('Bed not found')
    return bed


def create_bed(*, name: str, width: float, height: float) -> Bed:
    bed = Bed(id=new_id(), name=name, width=width, height=height, created_at=now_ms())
    db.session.add(bed)
    db.session.commit()
    logger.info('Created bed %s (%s)', bed.id, bed.name)
    return bed


def update_bed(bed_id: str, *, name: str, width: float, height: float) -> Bed:
    bed = get_bed(bed_id)
    bed.name = name
    bed.width = width
    bed.height = height
    db.session.commit()
    return bed


def delete_bed(bed_id: str) -> dict:
    """Delete a bed with its plantings and tasks. Missing beds are not an error."""
    bed = db.session.get(Bed, bed_id)
    if bed is not None:
        removed_plantings = len(bed.plantings)
        removed_tasks = len(bed.tasks)
        db.session.delete(bed)
        db.session.commit()
        logger.info(
            'Deleted bed %s with %d planting(s) and %d task(s)',
            bed_id, removed_plantings, removed_tasks,
        )
    return {'id': bed_id, 'deleted': True}


# --- plantings --------------------------------------------------------------

@with_db_resilience()
def list_plantings(bed_id: Optional[str] = None) -> List[Planting]:
    query = Planting.query
    if bed_id:
        query = query.filter_by(bed_id=bed_id)
    return query.order_by(Planting.created_at.asc()).all()


def create_planting(*, bed_id: str, crop_name: str, planting_date: int, notes: Optional[str] = None) -> Planting:
    if db.session.get(Bed, bed_id) is None:
        raise BadRequest('Associated bed not found')
    planting = Planting(
        id=new_id(),
        bed_id=bed_id,
        crop_name=crop_name,
        planting_date=planting_date,
        notes=notes or None,
        created_at=now_ms(),
        companion_plants=resolve_companions(crop_name).as_dict(),
    )
    db.session.add(planting)
    db.session.commit()
    logger.info('Planted %s in bed %s', crop_name, bed_id)
    return planting


def update_planting(planting_id: str, data: dict) -> Planting:
    planting = db.session.get(Planting, planting_id)
    if planting is None:
        raise NotFound('Planting not found')
    if 'harvestDate' in data:
        planting.harvest_date = data['harvestDate']
    db.session.commit()
    return planting


def delete_planting(planting_id: str) -> bool:
    planting = db.session.get(Planting, planting_id)
    if planting is None:
        return False
    db.session.delete(planting)
    db.session.commit()
    return True


@dataclass(frozen=True)
class BedHistory:
    current: List[Planting]
    past: List[Planting]


def bed_history(bed_id: str) -> BedHistory:
    """Plantings of a bed, newest first, split into current and harvested."""
    plantings = sorted(list_plantings(bed_id), key=lambda p: p.planting_date, reverse=True)
    return BedHistory(
        current=[p for p in plantings if p.is_active],
        past=[p for p in plantings if not p.is_active],
    )


# --- tasks ------------------------------------------------------------------

@with_db_resilience()
def list_tasks() -> List[Task]:
    return Task.query.order_by(Task.created_at.asc()).all()


def get_task(task_id: str) -> Task:
    task = db.session.get(Task, task_id)
    if task is None:
        raise NotFound('Task not found')
    return task


def sorted_tasks(tasks: List[Task]) -> List[Task]:
    """Open tasks first, each group by due date."""
    return sorted(tasks, key=lambda t: (bool(t.completed), t.due_date))


def create_task(data: dict) -> Task:
    _require_bed(data.get('bedId'))
    task = Task(id=new_id(), created_at=now_ms(), completed=False)
    _apply(task, data, _TASK_FIELDS)
    task.completed = bool(task.completed)
    db.session.add(task)
    db.session.commit()
    logger.debug('Created task %s', task.id)
    return task


def update_task(task_id: str, data: dict) -> Task:
    task = get_task(task_id)
    if 'bedId' in data:
        _require_bed(data['bedId'])
    _apply(task, data, _TASK_FIELDS)
    if task.completed is None:
        task.completed = False
    db.session.commit()
    return task


def delete_task(task_id: str) -> bool:
    task = db.session.get(Task, task_id)
    if task is None:
        return False
    db.session.delete(task)
    db.session.commit()
    return True


# --- journal ----------------------------------------------------------------

@with_db_resilience()
def list_journal_entries() -> List[JournalEntry]:
    return JournalEntry.query.order_by(JournalEntry.created_at.asc()).all()


def get_journal_entry(entry_id: str) -> JournalEntry:
    entry = db.session.get(JournalEntry, entry_id)
    if entry is None:
        raise NotFound('Journal entry not found')
    return entry


def newest_first(entries: List[JournalEntry]) -> List[JournalEntry]:
    return sorted(entries, key=lambda e: e.date, reverse=True)


def create_journal_entry(data: dict) -> JournalEntry:
    entry = JournalEntry(id=new_id(), created_at=now_ms())
    _apply(entry, data, _JOURNAL_FIELDS)
    db.session.add(entry)
    db.session.commit()
    logger.debug('Created journal entry %s', entry.id)
    return entry


def update_journal_entry(entry_id: str, data: dict) -> JournalEntry:
    entry = get_journal_entry(entry_id)
    _apply(entry, data, _JOURNAL_FIELDS)
    db.session.commit()
    return entry


def delete_journal_entry(entry_id: str) -> bool:
    entry = db.session.get(JournalEntry, entry_id)
    if entry is None:
        return False
    db.session.delete(entry)
    db.session.commit()
    return True


# --- profile ----------------------------------------------------------------

def _profile_id() -> str:
    return current_app.config.get('PROFILE_ID', 'main')


def get_profile() -> UserProfile:
    """The singleton profile, created with an empty location on first read."""
    profile = db.session.get(UserProfile, _profile_id())
    if profile is None:
        profile = UserProfile(id=_profile_id(), location='')
        db.session.add(profile)
        db.session.commit()
        logger.info('Initialized user profile %s', profile.id)
    return profile


def update_profile(*, location: str) -> UserProfile:
    profile = get_profile()
    profile.location = location
    db.session.commit()
    return profile


# --- read models ------------------------------------------------------------

def build_advice(now: Optional[datetime] = None) -> List[Advice]:
    """Advice for the stored garden. Computed per call, never stored."""
    profile = db.session.get(UserProfile, _profile_id())
    if profile is None:
        profile = UserProfile(id=_profile_id(), location='')
    advice = get_gardening_advice(profile, list_plantings(), now=now)
    logger.debug('Advisor produced %s', [a.id for a in advice])
    return advice


# the month after December must still be a valid datetime
MAX_CALENDAR_YEAR = 9998


@dataclass(frozen=True)
class CalendarEvent:
    type: str  # planting | task
    date: int
    data: dict

    def as_dict(self) -> dict:
        return {'type': self.type, 'date': self.date, 'data': self.data}


def month_bounds(year: int, month: int) -> tuple[int, int]:
    """[start, end) of a UTC calendar month in epoch ms."""
    if not 1 <= month <= 12:
        raise BadRequest('Month must be between 1 and 12')
    if not 1 <= year <= MAX_CALENDAR_YEAR:
        raise BadRequest(f'Year must be between 1 and {MAX_CALENDAR_YEAR}')
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end_year, end_month = (year + 1, 1) if month == 12 else (year, month + 1)
    end = datetime(end_year, end_month, 1, tzinfo=timezone.utc)
    return to_ms(start), to_ms(end)


def calendar_events(year: int, month: int) -> List[CalendarEvent]:
    """Plantings (by planting date) and tasks (by due date) within a month."""
    start, end = month_bounds(year, month)
    events = [
        CalendarEvent('planting', p.planting_date, p.to_dict())
        for p in Planting.query.filter(Planting.planting_date >= start, Planting.planting_date < end)
    ]
    events.extend(
        CalendarEvent('task', t.due_date, t.to_dict())
        for t in Task.query.filter(Task.due_date >= start, Task.due_date < end)
    )
    events.sort(key=lambda e: (e.date, e.type))
    return events


def parse_month(value: Optional[str], *, today: Optional[datetime] = None) -> tuple[int, int]:
    """'YYYY-MM' -> (year, month); blank means the current UTC month."""
    if not value:
        moment = to_datetime(today) if today else datetime.now(timezone.utc)
        return moment.year, moment.month
    try:
        parsed = datetime.strptime(value.strip(), '%Y-%m')
    except ValueError:
        raise BadRequest('Month must be formatted as YYYY-MM')
    if parsed.year > MAX_CALENDAR_YEAR:
        raise BadRequest(f'Year must be between 1 and {MAX_CALENDAR_YEAR}')
    return parsed.year, parsed.month
