"""
Browser UI: dashboard, beds, calendar, tasks, journal and settings.

Pages read and write through the garden services. Forms are the same
WTForms classes the JSON API validates with, read from ``request.form``
with CSRF protection.
"""

import calendar as _calendar
from collections import defaultdict

from flask import Blueprint, flash, redirect, render_template, request, url_for

from verdant.domain.companions import known_crops
from verdant.forms import (
    BedForm,
    JournalEntryForm,
    PlantingForm,
    PlantingUpdateForm,
    ProfileForm,
    TaskForm,
    first_error,
    form_data,
)
from verdant.services import garden
from verdant.utils.timestamps import now_ms, to_datetime


main_bp = Blueprint('main', __name__)

NAV_LINKS = (
    ('main.index', 'Dashboard'),
    ('main.beds', 'My Beds'),
    ('main.calendar_page', 'Calendar'),
    ('main.tasks', 'Tasks'),
    ('main.journal', 'Journal'),
)


@main_bp.app_context_processor
def inject_navigation():
    return {'nav_links': NAV_LINKS}


@main_bp.route('/')
def index():
    beds = garden.list_beds()
    active = [p for p in garden.list_plantings() if p.is_active]
    by_bed = defaultdict(list)
    for planting in active:
        by_bed[planting.bed_id].append(planting)
    return render_template(
        'index.html',
        advice=garden.build_advice(),
        beds=beds,
        plantings_by_bed=by_bed,
    )


# --- beds ---

@main_bp.route('/beds', methods=['GET', 'POST'])
def beds():
    form = BedForm()
    if form.validate_on_submit():
        bed = garden.create_bed(name=form.name.data, width=form.width.data, height=form.height.data)
        flash(f'Bed "{bed.name}" created.', 'success')
        return redirect(url_for('main.beds'))
    return render_template('beds.html', beds=garden.list_beds(), form=form)


@main_bp.route('/beds/<bed_id>/edit', methods=['GET', 'POST'])
def edit_bed(bed_id):
    bed = garden.get_bed(bed_id)
    form = BedForm(obj=bed)
    if form.validate_on_submit():
        garden.update_bed(bed_id, name=form.name.data, width=form.width.data, height=form.height.data)
        flash('Bed updated.', 'success')
        return redirect(url_for('main.bed_detail', bed_id=bed_id))
    return render_template('bed_form.html', bed=bed, form=form)


@main_bp.route('/beds/<bed_id>/delete', methods=['POST'])
def delete_bed(bed_id):
    garden.delete_bed(bed_id)
    flash('Bed deleted along with its plantings and tasks.', 'info')
    return redirect(url_for('main.beds'))


def _render_bed_detail(bed, planting_form):
    return render_template(
        'bed_detail.html',
        bed=bed,
        history=garden.bed_history(bed.id),
        planting_form=planting_form,
        harvest_form=PlantingUpdateForm(formdata=None),
        crops=known_crops(),
    )


@main_bp.route('/beds/<bed_id>')
def bed_detail(bed_id):
    bed = garden.get_bed(bed_id)
    return _render_bed_detail(bed, PlantingForm(data={'bedId': bed.id}))


@main_bp.route('/beds/<bed_id>/plantings', methods=['POST'])
def add_planting(bed_id):
    bed = garden.get_bed(bed_id)
    form = PlantingForm()
    if form.validate_on_submit():
        planting = garden.create_planting(
            bed_id=bed.id,
            crop_name=form.cropName.data,
            planting_date=form.plantingDate.data,
            notes=form.notes.data,
        )
        flash(f'Planted {planting.crop_name}.', 'success')
        return redirect(url_for('main.bed_detail', bed_id=bed.id))
    return _render_bed_detail(bed, form), 400


@main_bp.route('/plantings/<planting_id>/harvest', methods=['POST'])
def harvest_planting(planting_id):
    form = PlantingUpdateForm()
    if not form.validate_on_submit():
        flash(first_error(form) or 'Invalid harvest date', 'danger')
        return redirect(request.referrer or url_for('main.beds'))
    # no date submitted means harvested today
    harvested = form.harvestDate.data or now_ms()
    planting = garden.update_planting(planting_id, {'harvestDate': harvested})
    flash(f'{planting.crop_name} harvested.', 'success')
    return redirect(url_for('main.bed_detail', bed_id=planting.bed_id))


# --- calendar ---

@main_bp.route('/calendar')
def calendar_page():
    year, month = garden.parse_month(request.args.get('month'))
    events = garden.calendar_events(year, month)

    by_day = defaultdict(list)
    for event in events:
        by_day[to_datetime(event.date).day].append(event)

    prev_year, prev_month = (year - 1, 12) if month == 1 else (year, month - 1)
    next_year, next_month = (year + 1, 1) if month == 12 else (year, month + 1)

    return render_template(
        'calendar.html',
        title=f'{_calendar.month_name[month]} {year}',
        # Sunday-first weeks; 0 marks padding days.
        weeks=_calendar.Calendar(firstweekday=6).monthdayscalendar(year, month),
        events_by_day=by_day,
        beds_by_id={b.id: b for b in garden.list_beds()},
        prev_month=f'{prev_year:04d}-{prev_month:02d}' if prev_year >= 1 else None,
        next_month=(
            f'{next_year:04d}-{next_month:02d}' if next_year <= garden.MAX_CALENDAR_YEAR else None
        ),
    )


# --- tasks ---

@main_bp.route('/tasks', methods=['GET', 'POST'])
def tasks():
    form = TaskForm()
    if form.validate_on_submit():
        task = garden.create_task(form_data(form))
        flash(f'Task "{task.title}" added.', 'success')
        return redirect(url_for('main.tasks'))
    return render_template(
        'tasks.html',
        tasks=garden.sorted_tasks(garden.list_tasks()),
        beds=garden.list_beds(),
        form=form,
    )


@main_bp.route('/tasks/<task_id>/edit', methods=['GET', 'POST'])
def edit_task(task_id):
    task = garden.get_task(task_id)
    form = TaskForm(data=task.to_dict())
    if form.validate_on_submit():
        garden.update_task(task_id, form_data(form))
        flash('Task updated.', 'success')
        return redirect(url_for('main.tasks'))
    return render_template('task_form.html', task=task, beds=garden.list_beds(), form=form)


@main_bp.route('/tasks/<task_id>/toggle', methods=['POST'])
def toggle_task(task_id):
    task = garden.get_task(task_id)
    garden.update_task(task_id, {'completed': not task.completed})
    return redirect(url_for('main.tasks'))


@main_bp.route('/tasks/<task_id>/delete', methods=['POST'])
def delete_task(task_id):
    if garden.delete_task(task_id):
        flash('Task deleted.', 'info')
    return redirect(url_for('main.tasks'))


# --- journal ---

@main_bp.route('/journal', methods=['GET', 'POST'])
def journal():
    form = JournalEntryForm()
    if form.validate_on_submit():
        garden.create_journal_entry(form_data(form))
        flash('Journal entry saved.', 'success')
        return redirect(url_for('main.journal'))
    entries = garden.newest_first(garden.list_journal_entries())
    return render_template('journal.html', entries=entries, beds=garden.list_beds(), form=form)


@main_bp.route('/journal/<entry_id>/edit', methods=['GET', 'POST'])
def edit_journal_entry(entry_id):
    entry = garden.get_journal_entry(entry_id)
    form = JournalEntryForm(data=entry.to_dict())
    if form.validate_on_submit():
        garden.update_journal_entry(entry_id, form_data(form))
        flash('Journal entry updated.', 'success')
        return redirect(url_for('main.journal'))
    return render_template('journal_form.html', entry=entry, beds=garden.list_beds(), form=form)


@main_bp.route('/journal/<entry_id>/delete', methods=['POST'])
def delete_journal_entry(entry_id):
    if garden.delete_journal_entry(entry_id):
        flash('Journal entry deleted.', 'info')
    return redirect(url_for('main.journal'))


# --- settings ---

@main_bp.route('/settings', methods=['GET', 'POST'])
def settings():
    profile = garden.get_profile()
    form = ProfileForm(obj=profile)
    if form.validate_on_submit():
        garden.update_profile(location=form.location.data)
        flash('Settings saved.', 'success')
        return redirect(url_for('main.index'))
    return render_template('settings.html', form=form)
