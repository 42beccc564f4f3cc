"""Rule-based gardening advisor.

Rules run in a fixed order against the profile and the *active* plantings
(no harvest date). Each rule contributes at most one item, so the output is
deterministic for a given garden and evaluation instant.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from verdant.utils.timestamps import to_datetime, whole_days_between


class AdviceType:
    INFO = 'info'
    WARNING = 'warning'
    SUGGESTION = 'suggestion'


@dataclass(frozen=True)
class Advice:
    id: str
    type: str
    title: str
    message: str

    def as_dict(self) -> dict:
        return {'id': self.id, 'type': self.type, 'title': self.title, 'message': self.message}


SEEDLING_WINDOW_DAYS = 14
MIN_LOCATION_LENGTH = 2

CROP_FAMILIES: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    'nightshade': ('tomato', 'pepper', 'potato', 'eggplant'),
    'brassica': ('cabbage', 'broccoli', 'cauliflower', 'kale', 'kohlrabi'),
})


def _active(plantings: Iterable[Any]) -> List[Any]:
    return [p for p in plantings if getattr(p, 'harvest_date', None) is None]


def _crop_name(planting: Any) -> str:
    return str(getattr(planting, 'crop_name', '') or '').lower()


def _location_rule(profile: Any) -> Optional[Advice]:
    location = str(getattr(profile, 'location', '') or '')
    if len(location.strip()) >= MIN_LOCATION_LENGTH:
        return None
    return Advice(
        id='set-location',
        type=AdviceType.WARNING,
        title='Set Your Location',
        message=(
            'Add your location in Settings for personalized gardening advice '
            'and tips relevant to your climate.'
        ),
    )


def _seedlings_rule(active: Sequence[Any], now: datetime) -> Optional[Advice]:
    young = 0
    for planting in active:
        planted = to_datetime(getattr(planting, 'planting_date', None))
        if planted is None:
            continue
        if whole_days_between(planted, now) < SEEDLING_WINDOW_DAYS:
            young += 1
    if not young:
        return None
    return Advice(
        id='young-seedlings',
        type=AdviceType.INFO,
        title='Tender Seedlings',
        message=(
            f'You have {young} new planting(s). Remember to keep the soil consistently '
            'moist and protect them from strong winds or sun.'
        ),
    )


def _rotation_rule(active: Sequence[Any]) -> Optional[Advice]:
    names = [_crop_name(p) for p in active]
    for family, crops in CROP_FAMILIES.items():
        matches = sum(1 for name in names if any(crop in name for crop in crops))
        if matches > 1:
            # one rotation tip per call, first family wins
            return Advice(
                id=f'rotate-{family}',
                type=AdviceType.SUGGESTION,
                title='Crop Rotation Tip',
                message=(
                    f"You're growing multiple plants from the {family} family. To prevent soil "
                    'depletion and pests, avoid planting them in the same bed next season.'
                ),
            )
    return None


GENERAL_TIP = Advice(
    id='general-tip',
    type=AdviceType.INFO,
    title='Happy Gardening!',
    message=(
        'Your garden is looking great! Keep observing your plants daily and log '
        'your findings in the journal.'
    ),
)


def get_gardening_advice(
    profile: Any,
    plantings: Iterable[Any],
    *,
    now: Optional[datetime] = None,
) -> List[Advice]:
    """Evaluate the advisor rules.

    ``profile`` needs a ``location``; plantings need ``crop_name``,
    ``planting_date`` and ``harvest_date``. Missing attributes fall back to
    empty values. ``now`` defaults to the current UTC instant.
    """
    moment = to_datetime(now) if now is not None else datetime.now(timezone.utc)
    active = _active(plantings or ())

    advice: List[Advice] = []
    location = _location_rule(profile)
    if location is not None:
        advice.append(location)

    garden = [
        item for item in (_seedlings_rule(active, moment), _rotation_rule(active))
        if item is not None
    ]
    # the location warning is not garden advice; it never suppresses the tip
    advice.extend(garden or [GENERAL_TIP])
    return advice
