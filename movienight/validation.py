# movienight/validation.py
from datetime import date, datetime, time

from .models import VOTE_TYPES

TITLE_MAX_LENGTH = 200
DESCRIPTION_MIN_LENGTH = 10
ATTENDEE_NAME_MAX_LENGTH = 30


class ValidationError(Exception):
    """Raised with a ``{field: message}`` mapping for the form to show inline."""

    def __init__(self, errors):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{k}: {v}" for k, v in self.errors.items()))


def _text(data, key):
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def validate_movie(data):
    title = _text(data, "title")
    description = _text(data, "description")
    errors = {}

    if not title:
        errors["title"] = "Title is required"
    elif len(title) > TITLE_MAX_LENGTH:
        errors["title"] = f"Title must be at most {TITLE_MAX_LENGTH} characters"

    if not description:
        errors["description"] = "Description is required"
    elif len(description) < DESCRIPTION_MIN_LENGTH:
        errors["description"] = (
            f"Description is too short (at least {DESCRIPTION_MIN_LENGTH} characters)"
        )

    if errors:
        raise ValidationError(errors)
    return {"title": title, "description": description}


def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def validate_schedule(data, now=None):
    """Check a schedule form; returns ``(movie_id, date)``.

    A date counts as past when its midnight is earlier than ``now``, which
    also rules out today once the day has started.
    """
    now = now or datetime.now()
    movie_id = _text(data, "movie_id") or _text(data, "movieId")
    raw_date = data.get("date")
    errors = {}

    if not movie_id:
        errors["movie_id"] = "Please select a movie"

    night_date = None
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        errors["date"] = "Please select a date"
    else:
        try:
            night_date = parse_date(raw_date)
        except ValueError:
            errors["date"] = "Date is not valid"

    if night_date is not None and datetime.combine(night_date, time.min) < now:
        errors["date"] = "Please pick a date in the future"

    if errors:
        raise ValidationError(errors)
    return movie_id, night_date


def validate_attendee_name(name):
    name = (name or "").strip()
    if not name:
        raise ValidationError({"name": "Please enter a name"})
    if len(name) > ATTENDEE_NAME_MAX_LENGTH:
        raise ValidationError(
            {"name": f"Name must be at most {ATTENDEE_NAME_MAX_LENGTH} characters"}
        )
    return name


def parse_vote(value):
    if value is None:
        return None
    value = str(value).strip().lower()
    if value in ("", "none", "null"):
        return None
    if value not in VOTE_TYPES:
        raise ValidationError({"vote": "Vote must be 'up', 'down' or empty"})
    return value
