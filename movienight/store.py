# movienight/store.py
"""Mutations over movies, movie nights and attendees.

Every function commits its own change. Unknown ids are no-ops: the
function returns ``None`` (or ``False``) and leaves state untouched.
"""
from flask import current_app

from .models import db, Movie, MovieNight, Attendee
from .undo import KIND_MOVIE, KIND_MOVIE_NIGHT
from .validation import ValidationError, validate_attendee_name


def undo_buffer():
    return current_app.extensions["undo_buffer"]


# ---------------- MOVIES ----------------

def list_movies():
    return Movie.query.order_by(Movie.created_at, Movie.id).all()


def get_movie(movie_id):
    if not movie_id:
        return None
    return db.session.get(Movie, movie_id)


def add_movie(title, description):
    movie = Movie(title=title, description=description, votes_up=0, votes_down=0, user_vote=None)
    db.session.add(movie)
    db.session.commit()
    current_app.logger.info("Movie suggested: %s (%s)", movie.title, movie.id)
    return movie


def vote(movie_id, vote_type):
    movie = get_movie(movie_id)
    if movie is None:
        current_app.logger.debug("Vote ignored, movie %s not found", movie_id)
        return None

    movie.apply_vote(vote_type)
    db.session.commit()
    current_app.logger.info(
        "Vote on %s set to %s (up=%d, down=%d)",
        movie.id, vote_type, movie.votes_up, movie.votes_down,
    )
    return movie


def delete_movie(movie_id):
    """Delete a movie together with its movie nights; returns the undo entry."""
    movie = get_movie(movie_id)
    if movie is None:
        current_app.logger.debug("Delete ignored, movie %s not found", movie_id)
        return None

    movie_snapshot = movie.snapshot()
    night_snapshots = [n.snapshot() for n in movie.nights]

    db.session.delete(movie)
    db.session.commit()

    entry = undo_buffer().push(
        KIND_MOVIE,
        movie_snapshot["title"],
        movies=[movie_snapshot],
        nights=night_snapshots,
    )
    current_app.logger.info(
        "Movie %s deleted with %d movie night(s)", movie_snapshot["id"], len(night_snapshots)
    )
    return entry


# ---------------- MOVIE NIGHTS ----------------

def list_movie_nights():
    return MovieNight.query.order_by(MovieNight.created_at, MovieNight.id).all()


def get_movie_night(night_id):
    if not night_id:
        return None
    return db.session.get(MovieNight, night_id)


def schedule(movie_id, night_date):
    movie = get_movie(movie_id)
    if movie is None:
        current_app.logger.warning("Cannot schedule, movie %s not found", movie_id)
        return None

    night = MovieNight(movie_id=movie.id, date=night_date, attendees=[])
    db.session.add(night)
    db.session.commit()
    current_app.logger.info("Movie night %s scheduled: %s on %s", night.id, movie.title, night_date)
    return night


def _find_attendee(night_id, attendee_id):
    attendee = db.session.get(Attendee, attendee_id) if attendee_id else None
    if attendee is None or attendee.movie_night_id != night_id:
        return None
    return attendee


def toggle_attendance(night_id, attendee_id):
    attendee = _find_attendee(night_id, attendee_id)
    if attendee is None:
        return None

    attendee.is_attending = not attendee.is_attending
    db.session.commit()
    current_app.logger.info(
        "Attendee %s on night %s now attending=%s", attendee.name, night_id, attendee.is_attending
    )
    return attendee


def add_attendee(night_id, name):
    night = get_movie_night(night_id)
    if night is None:
        return None

    name = validate_attendee_name(name)
    if any(a.name.casefold() == name.casefold() for a in night.attendees):
        raise ValidationError({"name": f"{name} is already in the attendee list"})

    attendee = Attendee(name=name, is_attending=True)
    night.attendees.append(attendee)
    db.session.commit()
    current_app.logger.info("Attendee %s added to night %s", name, night.id)
    return attendee


def remove_attendee(night_id, attendee_id):
    attendee = _find_attendee(night_id, attendee_id)
    if attendee is None:
        return False

    db.session.delete(attendee)
    db.session.commit()
    current_app.logger.info("Attendee %s removed from night %s", attendee_id, night_id)
    return True


def remove_movie_night(night_id):
    night = get_movie_night(night_id)
    if night is None:
        return None

    snapshot = night.snapshot()
    label = night.movie.title if night.movie is not None else night.movie_id

    db.session.delete(night)
    db.session.commit()

    entry = undo_buffer().push(KIND_MOVIE_NIGHT, label, nights=[snapshot])
    current_app.logger.info("Movie night %s deleted", snapshot["id"])
    return entry


# ---------------- UNDO ----------------

def undo(token):
    """Restore whatever the undo entry for ``token`` holds, once.

    ``entry.restored`` counts the movies and nights actually re-inserted;
    it is zero when everything was skipped.
    """
    entry = undo_buffer().take(token)
    if entry is None:
        current_app.logger.debug("Undo token %s unknown or expired", token)
        return None

    restored = 0
    for data in entry.movies:
        if db.session.get(Movie, data["id"]) is not None:
            continue
        db.session.add(Movie.from_snapshot(data))
        restored += 1
    db.session.flush()

    for data in entry.nights:
        if db.session.get(MovieNight, data["id"]) is not None:
            continue
        if db.session.get(Movie, data["movie_id"]) is None:
            current_app.logger.warning(
                "Not restoring movie night %s, movie %s is gone", data["id"], data["movie_id"]
            )
            continue
        db.session.add(MovieNight.from_snapshot(data))
        restored += 1

    db.session.commit()
    entry.restored = restored
    current_app.logger.info(
        "Restored %s %s (%d of %d row(s))",
        entry.kind, entry.label, restored, len(entry.movies) + len(entry.nights),
    )
    return entry
