"""Advisor rules evaluated on plain objects (no Flask, no database)."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from verdant.domain.advisor import AdviceType, CROP_FAMILIES, get_gardening_advice
from verdant.utils.timestamps import to_ms


NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
DAY = timedelta(days=1)


@dataclass
class Profile:
    location: str = 'Austin, TX'


@dataclass
class Plant:
    crop_name: str
    planting_date: Optional[int]
    harvest_date: Optional[int] = None


def planted(crop, days_ago, harvested=False):
    when = to_ms(NOW - days_ago * DAY)
    return Plant(crop, when, to_ms(NOW) if harvested else None)


def ids(advice):
    return [a.id for a in advice]


def test_empty_location_and_no_plantings():
    advice = get_gardening_advice(Profile(location=''), [], now=NOW)
    assert ids(advice) == ['set-location', 'general-tip']
    assert advice[0].type == AdviceType.WARNING
    assert advice[1].type == AdviceType.INFO


@pytest.mark.parametrize('location', ['', '   ', 'X', ' X '])
def test_short_or_blank_location_warns(location):
    assert 'set-location' in ids(get_gardening_advice(Profile(location=location), [], now=NOW))


def test_missing_location_attribute_treated_as_empty():
    assert 'set-location' in ids(get_gardening_advice(object(), [], now=NOW))


def test_none_location_treated_as_empty():
    assert 'set-location' in ids(get_gardening_advice(Profile(location=None), [], now=NOW))


def test_spec_scenario_seedling_and_rotation():
    plantings = [planted('Tomato', 0), planted('Potato', 30)]
    advice = get_gardening_advice(Profile(), plantings, now=NOW)
    assert ids(advice) == ['young-seedlings', 'rotate-nightshade']
    assert 'You have 1 new planting(s).' in advice[0].message
    assert advice[1].type == AdviceType.SUGGESTION
    assert 'nightshade family' in advice[1].message


def test_seedling_count_matches_young_plantings():
    plantings = [planted('Lettuce', 0), planted('Carrot', 13), planted('Onion', 14), planted('Basil', 40)]
    advice = get_gardening_advice(Profile(), plantings, now=NOW)
    assert ids(advice) == ['young-seedlings']
    assert 'You have 2 new planting(s).' in advice[0].message


def test_partial_days_round_down():
    almost_two_weeks = Plant('Lettuce', to_ms(NOW - timedelta(days=14) + timedelta(hours=1)))
    advice = get_gardening_advice(Profile(), [almost_two_weeks], now=NOW)
    assert ids(advice) == ['young-seedlings']


def test_future_planting_counts_as_young():
    advice = get_gardening_advice(Profile(), [planted('Lettuce', -3)], now=NOW)
    assert ids(advice) == ['young-seedlings']


def test_harvested_plantings_are_ignored():
    plantings = [planted('Tomato', 1, harvested=True), planted('Pepper', 2, harvested=True)]
    assert ids(get_gardening_advice(Profile(), plantings, now=NOW)) == ['general-tip']


def test_planting_without_date_is_not_a_seedling():
    advice = get_gardening_advice(Profile(), [Plant('Lettuce', None)], now=NOW)
    assert ids(advice) == ['general-tip']


def test_accepts_datetime_planting_dates():
    advice = get_gardening_advice(Profile(), [Plant('Kale', NOW - 2 * DAY)], now=NOW)
    assert ids(advice) == ['young-seedlings']


def test_brassica_rotation():
    plantings = [planted('Red Cabbage', 30), planted('Curly Kale', 30)]
    assert ids(get_gardening_advice(Profile(), plantings, now=NOW)) == ['rotate-brassica']


def test_only_one_rotation_tip_even_if_several_families_qualify():
    plantings = [
        planted('Broccoli', 30), planted('Cauliflower', 30),
        planted('Tomato', 30), planted('Eggplant', 30),
    ]
    advice = get_gardening_advice(Profile(), plantings, now=NOW)
    rotation = [a for a in advice if a.id.startswith('rotate-')]
    assert [a.id for a in rotation] == ['rotate-nightshade']


def test_single_family_member_does_not_trigger_rotation():
    plantings = [planted('Tomato', 30), planted('Cabbage', 30)]
    assert ids(get_gardening_advice(Profile(), plantings, now=NOW)) == ['general-tip']


def test_location_warning_keeps_general_tip_for_a_quiet_garden():
    advice = get_gardening_advice(Profile(location='X'), [planted('Garlic', 60)], now=NOW)
    assert ids(advice) == ['set-location', 'general-tip']


def test_general_tip_only_when_nothing_else_fires():
    advice = get_gardening_advice(Profile(), [planted('Garlic', 60)], now=NOW)
    assert len(advice) == 1
    assert advice[0].id == 'general-tip'
    assert advice[0].title == 'Happy Gardening!'


def test_rule_order_is_stable():
    plantings = [planted('Tomato', 1), planted('Sweet Pepper', 1)]
    first = get_gardening_advice(Profile(location=''), plantings, now=NOW)
    second = get_gardening_advice(Profile(location=''), list(plantings), now=NOW)
    assert ids(first) == ids(second) == ['set-location', 'young-seedlings', 'rotate-nightshade']
    assert first == second


def test_inputs_are_not_mutated():
    plantings = [planted('Tomato', 1)]
    snapshot = list(plantings)
    get_gardening_advice(Profile(), plantings, now=NOW)
    assert plantings == snapshot


def test_crop_families_are_read_only():
    with pytest.raises(TypeError):
        CROP_FAMILIES['legume'] = ('bean', 'pea')


def test_advice_serialization():
    advice = get_gardening_advice(Profile(location=''), [], now=NOW)
    assert advice[0].as_dict() == {
        'id': 'set-location',
        'type': 'warning',
        'title': 'Set Your Location',
        'message': advice[0].message,
    }
