"""
Completion percentages over fixed sets of milestones or form fields.

Both the boost-client tracker and the onboarding form reduce to the same
question (how many of N flags are set), so both go through
``calculate_progress``. Rounding is half-up, done in integer arithmetic so
that exact halves never drift through float representation.
"""
from typing import Any, Iterable, Mapping, Sequence

from ..models.boost_client import MILESTONES

BOOST_MILESTONE_FIELDS = tuple(flag for flag, _ in MILESTONES)

ONBOARDING_REQUIRED_FIELDS = (
    "business_name",
    "contact_name",
    "email",
    "phone",
    "client_type",
)

ONBOARDING_OPTIONAL_FIELDS = (
    "web_slug",
    "goals",
    "monthly_ad_budget",
    "promotions",
    "asset_file_names",
    "landing_page_choice",
    "customizations",
)


def calculate_progress(flags: Iterable[Any]) -> int:
    """Return round-half-up(100 * set / total) as an int in [0, 100]; 0 for no flags"""
    values = [bool(f) for f in flags]
    total = len(values)
    if total == 0:
        return 0
    done = sum(values)
    return (200 * done + total) // (2 * total)


def is_filled(value: Any) -> bool:
    if value is None:
        return False
    return len(str(value).strip()) > 0


def field_flags(data: Mapping[str, Any], fields: Sequence[str]) -> list:
    return [is_filled(data.get(name)) for name in fields]


def boost_progress(source: Any) -> int:
    """Progress of a boost client, from a model instance or a mapping of flags"""
    if isinstance(source, Mapping):
        flags = [source.get(name) for name in BOOST_MILESTONE_FIELDS]
    else:
        flags = source.milestone_flags
    return calculate_progress(flags)


def onboarding_progress(data: Mapping[str, Any]) -> int:
    flags = field_flags(data, ONBOARDING_REQUIRED_FIELDS) + field_flags(data, ONBOARDING_OPTIONAL_FIELDS)
    return calculate_progress(flags)
