# movienight/seed.py
from datetime import date, timedelta

from .models import db, Movie, MovieNight, Attendee

DEMO_MOVIES = [
    ("1", "The Shawshank Redemption", "Two imprisoned men bond over a number of years.", 4, 1),
    ("2", "The Godfather",
     "The aging patriarch of an organized crime dynasty transfers control to his son.", 2, 0),
    ("3", "The Dark Knight", "Batman fights the menace known as the Joker.", 5, 2),
]

DEMO_ATTENDEES = ["Alice", "Bob", "Charlie"]


def seed_demo_data(today=None):
    """Fill an empty database with the mock movies and one upcoming movie night."""
    if Movie.query.first() is not None:
        return False

    today = today or date.today()
    for movie_id, title, description, up, down in DEMO_MOVIES:
        db.session.add(Movie(
            id=movie_id,
            title=title,
            description=description,
            votes_up=up,
            votes_down=down,
            user_vote=None,
        ))
    db.session.flush()

    night = MovieNight(
        movie_id=DEMO_MOVIES[0][0],
        date=today + timedelta(days=7),
        attendees=[Attendee(name=name, is_attending=True) for name in DEMO_ATTENDEES],
    )
    db.session.add(night)
    db.session.commit()
    return True
