"""
Database Models for the Verdant garden application

This module defines all database models using SQLAlchemy ORM.
Models include Bed, Planting, Task, JournalEntry and the singleton UserProfile.

Instants are stored as integer UTC epoch milliseconds, which is also the
form used on the JSON API.
"""

import uuid

from verdant.extensions import db
from verdant.utils.timestamps import now_ms


def new_id() -> str:
    return str(uuid.uuid4())


def _compact(payload: dict) -> dict:
    """Drop optional keys whose value is unset."""
    return {k: v for k, v in payload.items() if v is not None}


class Bed(db.Model):
    """A garden bed with its footprint (feet or metres, user's choice)"""

    __tablename__ = 'beds'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    width = db.Column(db.Float, nullable=False)
    height = db.Column(db.Float, nullable=False)
    created_at = db.Column(db.BigInteger, nullable=False, default=now_ms)

    plantings = db.relationship(
        'Planting',
        backref='bed',
        lazy='select',
        cascade='all, delete-orphan',
    )
    tasks = db.relationship(
        'Task',
        backref='bed',
        lazy='select',
        cascade='all, delete-orphan',
    )

    @property
    def area(self):
        return (self.width or 0) * (self.height or 0)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'width': self.width,
            'height': self.height,
            'createdAt': self.created_at,
        }

    def __repr__(self):
        return f'<Bed {self.name}>'


class Planting(db.Model):
    """A crop sown or transplanted into a bed; active until harvested"""

    __tablename__ = 'plantings'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    bed_id = db.Column(
        db.String(36), db.ForeignKey('beds.id', ondelete='CASCADE'), nullable=False, index=True
    )
    crop_name = db.Column(db.String(200), nullable=False)
    planting_date = db.Column(db.BigInteger, nullable=False)
    harvest_date = db.Column(db.BigInteger)
    notes = db.Column(db.Text)
    companion_plants = db.Column(db.JSON)
    created_at = db.Column(db.BigInteger, nullable=False, default=now_ms)

    @property
    def is_active(self):
        return self.harvest_date is None

    def to_dict(self):
        return _compact({
            'id': self.id,
            'bedId': self.bed_id,
            'cropName': self.crop_name,
            'plantingDate': self.planting_date,
            'harvestDate': self.harvest_date,
            'notes': self.notes,
            'createdAt': self.created_at,
            'companionPlants': self.companion_plants,
        })

    def __repr__(self):
        return f'<Planting {self.crop_name} in {self.bed_id}>'


class Task(db.Model):
    """A to-do item, optionally tied to a bed or planting"""

    __tablename__ = 'tasks'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    bed_id = db.Column(db.String(36), db.ForeignKey('beds.id', ondelete='CASCADE'), index=True)
    planting_id = db.Column(db.String(36))
    title = db.Column(db.String(200), nullable=False)
    notes = db.Column(db.Text)
    due_date = db.Column(db.BigInteger, nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.BigInteger, nullable=False, default=now_ms)

    def to_dict(self):
        return _compact({
            'id': self.id,
            'bedId': self.bed_id,
            'plantingId': self.planting_id,
            'title': self.title,
            'notes': self.notes,
            'dueDate': self.due_date,
            'completed': bool(self.completed),
            'createdAt': self.created_at,
        })

    def __repr__(self):
        return f'<Task {self.title}>'


class JournalEntry(db.Model):
    """Free-form garden observation"""

    __tablename__ = 'journal_entries'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    date = db.Column(db.BigInteger, nullable=False)
    notes = db.Column(db.Text, nullable=False)
    bed_id = db.Column(db.String(36))
    planting_id = db.Column(db.String(36))
    tags = db.Column(db.JSON)
    created_at = db.Column(db.BigInteger, nullable=False, default=now_ms)

    def to_dict(self):
        return _compact({
            'id': self.id,
            'date': self.date,
            'notes': self.notes,
            'bedId': self.bed_id,
            'plantingId': self.planting_id,
            'tags': self.tags,
            'createdAt': self.created_at,
        })

    def __repr__(self):
        return f'<JournalEntry {self.id}>'


class UserProfile(db.Model):
    """Gardener settings. One row per deployment (id 'main')."""

    __tablename__ = 'user_profiles'

    id = db.Column(db.String(36), primary_key=True)
    location = db.Column(db.String(200), nullable=False, default='')

    def to_dict(self):
        return {'id': self.id, 'location': self.location or ''}

    def __repr__(self):
        return f'<UserProfile {self.id}>'
