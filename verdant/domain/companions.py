from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class CompanionSet:
    good: Tuple[str, ...]
    bad: Tuple[str, ...]

    def as_dict(self) -> dict:
        return {'good': list(self.good), 'bad': list(self.bad)}


# Order matters: the first key found inside the crop name wins
# ("Sweet Pepper Tomato" resolves to tomato).
COMPANION_TABLE: Tuple[Tuple[str, CompanionSet], ...] = (
    ('tomato', CompanionSet(
        good=('Basil', 'Carrots', 'Marigolds', 'Onions', 'Lettuce'),
        bad=('Cabbage', 'Corn', 'Fennel', 'Potatoes'),
    )),
    ('carrot', CompanionSet(
        good=('Lettuce', 'Onions', 'Rosemary', 'Sage', 'Tomatoes'),
        bad=('Dill', 'Fennel', 'Parsnips'),
    )),
    ('lettuce', CompanionSet(
        good=('Carrots', 'Cucumbers', 'Radishes', 'Strawberries', 'Marigolds'),
        bad=('Cabbage', 'Parsley'),
    )),
    ('cucumber', CompanionSet(
        good=('Beans', 'Corn', 'Lettuce', 'Peas', 'Radishes'),
        bad=('Potatoes', 'Sage', 'Aromatic herbs'),
    )),
    ('pepper', CompanionSet(
        good=('Basil', 'Carrots', 'Onions', 'Tomatoes'),
        bad=('Fennel', 'Kohlrabi'),
    )),
    ('bean', CompanionSet(
        good=('Carrots', 'Corn', 'Cucumbers', 'Potatoes', 'Strawberries'),
        bad=('Garlic', 'Onions', 'Peppers'),
    )),
    ('basil', CompanionSet(
        good=('Tomatoes', 'Peppers', 'Asparagus'),
        bad=('Rue',),
    )),
    ('corn', CompanionSet(
        good=('Beans', 'Cucumbers', 'Peas', 'Squash'),
        bad=('Tomatoes',),
    )),
    ('squash', CompanionSet(
        good=('Corn', 'Beans', 'Marigolds', 'Nasturtiums'),
        bad=('Potatoes',),
    )),
    ('potato', CompanionSet(
        good=('Beans', 'Cabbage', 'Corn', 'Marigolds'),
        bad=('Cucumber', 'Squash', 'Sunflowers', 'Tomatoes'),
    )),
    ('onion', CompanionSet(
        good=('Carrots', 'Lettuce', 'Tomatoes', 'Chamomile'),
        bad=('Beans', 'Peas', 'Sage'),
    )),
    ('garlic', CompanionSet(
        good=('Roses', 'Fruit trees', 'Tomatoes', 'Cabbage'),
        bad=('Beans', 'Peas', 'Asparagus'),
    )),
    ('cabbage', CompanionSet(
        good=('Beans', 'Celery', 'Onions', 'Thyme'),
        bad=('Grapes', 'Strawberries', 'Tomatoes'),
    )),
    ('strawberry', CompanionSet(
        good=('Beans', 'Lettuce', 'Onions', 'Spinach'),
        bad=('Cabbage', 'Fennel'),
    )),
)

DEFAULT_COMPANIONS = CompanionSet(
    good=('Marigolds (pest control)', 'Borage (attracts pollinators)'),
    bad=('Fennel (inhibits growth)',),
)


def known_crops() -> Tuple[str, ...]:
    return tuple(key for key, _ in COMPANION_TABLE)


def resolve_companions(crop_name: Optional[str]) -> CompanionSet:
    """Companion plants for a free-text crop name.

    Case-insensitive substring match against ``COMPANION_TABLE`` in declaration
    order; unknown crops get ``DEFAULT_COMPANIONS``.
    """
    name = (crop_name or '').lower()
    for key, companions in COMPANION_TABLE:
        if key in name:
            return companions
    return DEFAULT_COMPANIONS
