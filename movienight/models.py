# movienight/models.py
import time
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

VOTE_UP = "up"
VOTE_DOWN = "down"
VOTE_TYPES = (VOTE_UP, VOTE_DOWN)

_last_id = 0


def new_id():
    """Time-based id (epoch milliseconds), strictly increasing within the process."""
    global _last_id
    candidate = int(time.time() * 1000)
    if candidate <= _last_id:
        candidate = _last_id + 1
    _last_id = candidate
    return str(candidate)


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Movie(db.Model):
    __tablename__ = "movies"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    votes_up = db.Column(db.Integer, nullable=False, default=0)
    votes_down = db.Column(db.Integer, nullable=False, default=0)
    user_vote = db.Column(db.String(4))  # "up", "down" or NULL
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    nights = db.relationship(
        "MovieNight",
        back_populates="movie",
        cascade="all, delete-orphan",
        order_by="[MovieNight.created_at, MovieNight.id]",
    )

    def __repr__(self):
        return f"<Movie {self.id}:{self.title}>"

    def apply_vote(self, vote_type):
        """Move the current user's vote to ``vote_type`` (None retracts it).

        The previous contribution is reverted before the new one is counted,
        so switching sides touches exactly one counter in each direction.
        """
        if vote_type is not None and vote_type not in VOTE_TYPES:
            raise ValueError(f"unknown vote type: {vote_type!r}")

        up = self.votes_up or 0
        down = self.votes_down or 0

        if self.user_vote == VOTE_UP:
            up = max(0, up - 1)
        elif self.user_vote == VOTE_DOWN:
            down = max(0, down - 1)

        if vote_type == VOTE_UP:
            up += 1
        elif vote_type == VOTE_DOWN:
            down += 1

        self.votes_up = up
        self.votes_down = down
        self.user_vote = vote_type

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "votes": {"up": self.votes_up, "down": self.votes_down},
            "userVote": self.user_vote,
        }

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "votes_up": self.votes_up,
            "votes_down": self.votes_down,
            "user_vote": self.user_vote,
            "created_at": self.created_at,
        }

    @classmethod
    def from_snapshot(cls, data):
        return cls(**data)


class MovieNight(db.Model):
    __tablename__ = "movie_nights"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    movie_id = db.Column(db.String(32), db.ForeignKey("movies.id"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    movie = db.relationship("Movie", back_populates="nights")
    attendees = db.relationship(
        "Attendee",
        back_populates="night",
        cascade="all, delete-orphan",
        order_by="[Attendee.created_at, Attendee.id]",
    )

    def __repr__(self):
        return f"<MovieNight {self.id}:{self.movie_id}@{self.date}>"

    @property
    def attending_count(self):
        return sum(1 for a in self.attendees if a.is_attending)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "movieId": self.movie_id,
            "date": self.date.isoformat(),
            "attendees": [a.to_dict() for a in self.attendees],
        }

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "movie_id": self.movie_id,
            "date": self.date,
            "created_at": self.created_at,
            "attendees": [a.snapshot() for a in self.attendees],
        }

    @classmethod
    def from_snapshot(cls, data):
        data = dict(data)
        attendees = [Attendee(**a) for a in data.pop("attendees", [])]
        return cls(attendees=attendees, **data)


class Attendee(db.Model):
    __tablename__ = "attendees"
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    movie_night_id = db.Column(db.String(32), db.ForeignKey("movie_nights.id"), nullable=False)
    name = db.Column(db.String(30), nullable=False)
    is_attending = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    night = db.relationship("MovieNight", back_populates="attendees")

    def __repr__(self):
        return f"<Attendee {self.id}:{self.name}>"

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "isAttending": self.is_attending}

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "is_attending": self.is_attending,
            "created_at": self.created_at,
        }
