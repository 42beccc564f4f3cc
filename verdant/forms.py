"""
WTForms Form Classes for the Verdant garden application

This module defines the forms used by the JSON API and the browser pages.
API forms are fed from the decoded JSON body (see ``form_from_payload``);
browser forms read ``request.form`` with CSRF protection. Instants are epoch
milliseconds; browser date inputs (``YYYY-MM-DD``) are read as UTC midnight.
"""

import math
import re
from datetime import datetime, timezone
from typing import Iterable, Optional as Opt

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import BooleanField, Field, FloatField, IntegerField, StringField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length, Optional, ValidationError
from wtforms.widgets import TextInput

from verdant.utils.timestamps import format_ms, to_ms


_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def _as_text(value):
    if value is None or isinstance(value, str):
        return value
    return str(value)


def _stripped(value):
    return value.strip() if isinstance(value, str) else value


class Positive:
    """Number must be finite and strictly greater than zero."""

    def __init__(self, message=None):
        self.message = message

    def __call__(self, form, field):
        if field.data is None or not math.isfinite(field.data) or field.data <= 0:
            raise ValidationError(self.message or f'{field.label.text} must be positive')


class InstantField(IntegerField):
    """Epoch milliseconds from the API, or a ``YYYY-MM-DD`` date input."""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        raw = valuelist[0]
        if isinstance(raw, str):
            raw = raw.strip()
            if not raw:
                self.data = None
                return
            if _ISO_DATE.match(raw):
                try:
                    day = datetime.strptime(raw, '%Y-%m-%d')
                except ValueError as exc:
                    self.data = None
                    raise ValueError('Not a valid date.') from exc
                self.data = to_ms(day.replace(tzinfo=timezone.utc))
                return
        elif isinstance(raw, float) and not math.isfinite(raw):
            self.data = None
            raise ValueError(self.gettext('Not a valid integer value.'))
        super().process_formdata([raw])

    def _value(self):
        if self.raw_data:
            return str(self.raw_data[0])
        if self.data:
            return format_ms(self.data, '%Y-%m-%d')
        return ''


class StringListField(Field):
    """List of non-empty strings: a JSON array, or comma-separated text."""

    widget = TextInput()

    def process_formdata(self, valuelist):
        if valuelist:
            items = []
            for value in valuelist:
                if value is None:
                    continue
                items.extend(str(value).split(','))
            self.data = [item.strip() for item in items if item.strip()]

    def _value(self):
        return ', '.join(self.data or [])


class BedForm(FlaskForm):
    """Garden bed create/update"""

    name = StringField('Name', filters=[_as_text, _stripped], validators=[
        DataRequired(message='Name is required'),
        Length(max=200, message='Name must be 200 characters or less'),
    ])
    width = FloatField('Width', validators=[
        Positive(message='Width must be positive'),
    ])
    height = FloatField('Height', validators=[
        Positive(message='Height must be positive'),
    ])


class PlantingForm(FlaskForm):
    """New planting in an existing bed"""

    bedId = StringField('Bed', filters=[_as_text], validators=[
        DataRequired(message='Bed ID is required'),
    ])
    cropName = StringField('Crop name', filters=[_as_text, _stripped], validators=[
        DataRequired(message='Crop name is required'),
        Length(max=200, message='Crop name must be 200 characters or less'),
    ])
    plantingDate = InstantField('Planting date', validators=[
        Positive(message='Planting date is required'),
    ])
    notes = TextAreaField('Notes', filters=[_as_text], validators=[Optional()])


class PlantingUpdateForm(FlaskForm):
    """Harvest recording"""

    harvestDate = InstantField('Harvest date', validators=[
        Optional(),
        Positive(message='Harvest date must be positive'),
    ])


class TaskForm(FlaskForm):
    """Garden task"""

    title = StringField('Title', filters=[_as_text, _stripped], validators=[
        DataRequired(message='Title is required'),
        Length(max=200, message='Title must be 200 characters or less'),
    ])
    dueDate = InstantField('Due date', validators=[
        Positive(message='Due date is required'),
    ])
    completed = BooleanField('Completed', default=False)
    bedId = StringField('Bed', filters=[_as_text], validators=[Optional()])
    plantingId = StringField('Planting', filters=[_as_text], validators=[Optional()])
    notes = TextAreaField('Notes', filters=[_as_text], validators=[Optional()])


class JournalEntryForm(FlaskForm):
    """Journal entry"""

    date = InstantField('Date', validators=[
        Positive(message='Date is required'),
    ])
    notes = TextAreaField('Notes', filters=[_as_text, _stripped], validators=[
        DataRequired(message='Notes are required'),
    ])
    bedId = StringField('Bed', filters=[_as_text], validators=[Optional()])
    plantingId = StringField('Planting', filters=[_as_text], validators=[Optional()])
    tags = StringListField('Tags')


class ProfileForm(FlaskForm):
    """Settings: gardener location (e.g. 'USDA Zone 7b' or 'Austin, TX')"""

    location = StringField('Location', filters=[_as_text, _stripped], validators=[
        DataRequired(message='Location is required'),
        Length(min=2, max=200, message='Location is required'),
    ])
    submit = SubmitField('Save')


def form_from_payload(form_cls, payload: dict):
    """Build ``form_cls`` from a decoded JSON object.

    JSON nulls are treated as absent input; ``submitted_data`` still reports
    them so a partial update can clear an optional value.
    """
    present = {k: v for k, v in payload.items() if v is not None}
    return form_cls(formdata=MultiDict(present), meta={'csrf': False})


def validate_partial(form, fields: Iterable[str]) -> bool:
    """Validate only the named fields (partial update)."""
    ok = True
    for name in fields:
        field = form._fields.get(name)
        if field is None:
            continue
        if not field.validate(form):
            ok = False
    return ok


def submitted_data(form, payload: dict) -> dict:
    """Field values for keys present in the payload, in form declaration order."""
    return {
        name: field.data
        for name, field in form._fields.items()
        if name in payload and name not in ('submit', 'csrf_token')
    }


def form_data(form) -> dict:
    """Every field value, keyed by field name (full create or update)."""
    return {
        name: field.data
        for name, field in form._fields.items()
        if name not in ('submit', 'csrf_token')
    }


def first_error(form) -> Opt[str]:
    for field in form:
        if field.errors:
            return field.errors[0]
    return None
