from datetime import datetime, timedelta, timezone

import click
from flask.cli import with_appcontext

from verdant.domain.companions import resolve_companions
from verdant.extensions import db
from verdant.models import Bed
from verdant.services import garden
from verdant.utils.timestamps import now_ms, MS_PER_DAY


@click.command('init-db')
@with_appcontext
def init_db_command() -> None:
    """Create missing tables (local use; deployments run migrations)."""
    db.create_all()
    click.echo('Database tables are ready.')


@click.command('seed-demo')
@click.option('--force', is_flag=True, help='Seed even if beds already exist')
@with_appcontext
def seed_demo_command(force: bool) -> None:
    """Create a small sample garden (beds, plantings, a task and a journal entry)."""
    if Bed.query.count() and not force:
        raise click.ClickException('Beds already exist. Use --force to add the demo garden anyway.')

    today = now_ms()
    veg = garden.create_bed(name='Vegetable Patch', width=4, height=8)
    herbs = garden.create_bed(name='Herb Spiral', width=3, height=3)

    garden.create_planting(bed_id=veg.id, crop_name='Cherry Tomato', planting_date=today - 3 * MS_PER_DAY)
    garden.create_planting(bed_id=veg.id, crop_name='Potato', planting_date=today - 40 * MS_PER_DAY)
    garden.create_planting(bed_id=herbs.id, crop_name='Genovese Basil', planting_date=today - 20 * MS_PER_DAY)

    garden.create_task({
        'title': 'Water the seedlings',
        'dueDate': today + MS_PER_DAY,
        'completed': False,
        'bedId': veg.id,
    })
    garden.create_journal_entry({
        'date': today,
        'notes': 'First true leaves on the tomatoes.',
        'bedId': veg.id,
        'tags': ['tomato', 'seedlings'],
    })
    click.echo(f"Seeded demo garden with beds '{veg.name}' and '{herbs.name}'.")


@click.command('advise')
@click.option('--days-ahead', default=0, type=int, help='Evaluate as if this many days had passed')
@with_appcontext
def advise_command(days_ahead: int) -> None:
    """Print the advisor output for the stored garden."""
    moment = datetime.now(timezone.utc) + timedelta(days=days_ahead)
    for item in garden.build_advice(now=moment):
        click.echo(f'[{item.type}] {item.title}: {item.message}')


@click.command('companions')
@click.argument('crop')
def companions_command(crop: str) -> None:
    """Show companion plants for CROP."""
    crop = (crop or '').strip()
    if not crop:
        raise click.ClickException('Crop name is required.')
    companions = resolve_companions(crop)
    click.echo('Good: ' + ', '.join(companions.good))
    click.echo('Bad: ' + ', '.join(companions.bad))
