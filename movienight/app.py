# movienight/app.py
from flask import Flask, render_template, redirect, url_for, request, flash, jsonify

from .config import Config
from .models import db
from . import store
from .seed import seed_demo_data
from .undo import UndoBuffer
from .validation import (
    ValidationError,
    validate_movie,
    validate_schedule,
    parse_vote,
)


def _flash_errors(err):
    for message in err.errors.values():
        flash(message, "danger")


def _validation_response(err):
    return jsonify({"error": "validation failed", "fields": err.errors}), 400


def _not_found():
    return jsonify({"error": "not found"}), 404


def _undo_payload(entry):
    return {
        "undoToken": entry.token,
        "kind": entry.kind,
        "label": entry.label,
        "expiresIn": round(store.undo_buffer().seconds_left(entry), 1),
    }


def _payload():
    if not request.is_json:
        return request.form
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError({"body": "Request body must be a JSON object"})
    return data


def longdate(value):
    return f"{value:%A, %B} {value.day}, {value.year}"


def create_app(config_object=Config):
    app = Flask(__name__, template_folder="templates")
    app.config.from_object(config_object)
    db.init_app(app)
    app.extensions["undo_buffer"] = UndoBuffer(app.config["UNDO_WINDOW_SECONDS"])
    app.add_template_filter(longdate)

    # In-memory database: tables and demo data are rebuilt on every start
    with app.app_context():
        db.create_all()
        if app.config.get("SEED_DEMO_DATA") and seed_demo_data():
            app.logger.info("Seeded demo movies and movie night")

    # ---------------- HOME ----------------
    @app.route("/")
    def home():
        movies = store.list_movies()
        nights = store.list_movie_nights()
        pending_undo = store.undo_buffer().pending()
        return render_template("index.html", movies=movies, nights=nights, pending_undo=pending_undo)

    # ---------------- MOVIES ----------------
    @app.route("/movies", methods=["POST"])
    def add_movie():
        try:
            values = validate_movie(request.form)
        except ValidationError as err:
            _flash_errors(err)
            return redirect(url_for("home"))

        movie = store.add_movie(values["title"], values["description"])
        flash(f"{movie.title} added to suggestions", "success")
        return redirect(url_for("home"))

    @app.route("/movies/<movie_id>/vote", methods=["POST"])
    def vote(movie_id):
        try:
            vote_type = parse_vote(request.form.get("vote"))
        except ValidationError as err:
            _flash_errors(err)
            return redirect(url_for("home"))

        if store.vote(movie_id, vote_type) is None:
            flash("That movie no longer exists", "warning")
        return redirect(url_for("home"))

    @app.route("/movies/<movie_id>/delete", methods=["POST"])
    def delete_movie(movie_id):
        entry = store.delete_movie(movie_id)
        if entry is None:
            flash("That movie no longer exists", "warning")
        else:
            flash(f"{entry.label} deleted", "info")
        return redirect(url_for("home"))

    # ---------------- MOVIE NIGHTS ----------------
    @app.route("/nights", methods=["POST"])
    def schedule():
        try:
            movie_id, night_date = validate_schedule(request.form)
        except ValidationError as err:
            _flash_errors(err)
            return redirect(url_for("home"))

        night = store.schedule(movie_id, night_date)
        if night is None:
            flash("Selected movie no longer exists", "warning")
        else:
            flash(f"Movie night has been scheduled for {longdate(night.date)}", "success")
        return redirect(url_for("home"))

    @app.route("/nights/<night_id>/delete", methods=["POST"])
    def remove_movie_night(night_id):
        entry = store.remove_movie_night(night_id)
        if entry is None:
            flash("That movie night no longer exists", "warning")
        else:
            flash("The movie night has been removed from the schedule", "info")
        return redirect(url_for("home"))

    @app.route("/nights/<night_id>/attendees", methods=["POST"])
    def add_attendee(night_id):
        try:
            attendee = store.add_attendee(night_id, request.form.get("name"))
        except ValidationError as err:
            _flash_errors(err)
            return redirect(url_for("home"))

        if attendee is None:
            flash("That movie night no longer exists", "warning")
        else:
            flash(f"{attendee.name} has been added to the attendee list", "success")
        return redirect(url_for("home"))

    @app.route("/nights/<night_id>/attendees/<attendee_id>/toggle", methods=["POST"])
    def toggle_attendance(night_id, attendee_id):
        if store.toggle_attendance(night_id, attendee_id) is None:
            flash("That attendee no longer exists", "warning")
        return redirect(url_for("home"))

    @app.route("/nights/<night_id>/attendees/<attendee_id>/delete", methods=["POST"])
    def remove_attendee(night_id, attendee_id):
        if store.remove_attendee(night_id, attendee_id):
            flash("The attendee has been removed from the list", "info")
        else:
            flash("That attendee no longer exists", "warning")
        return redirect(url_for("home"))

    # ---------------- UNDO ----------------
    @app.route("/undo/<token>", methods=["POST"])
    def undo(token):
        entry = store.undo(token)
        if entry is None:
            flash("Nothing to undo, the undo window has passed", "warning")
        elif not entry.restored:
            flash(f"{entry.label} could not be restored, its movie is gone", "warning")
        else:
            flash(f"{entry.label} restored", "success")
        return redirect(url_for("home"))

    # ---------------- API MOVIES ----------------
    @app.route("/api/movies")
    def api_movies():
        return jsonify([m.to_dict() for m in store.list_movies()])

    @app.route("/api/movie/<movie_id>")
    def api_movie(movie_id):
        m = store.get_movie(movie_id)
        if not m:
            return _not_found()
        return jsonify(m.to_dict())

    @app.route("/api/movies", methods=["POST"])
    def api_add_movie():
        try:
            values = validate_movie(_payload())
        except ValidationError as err:
            return _validation_response(err)

        movie = store.add_movie(values["title"], values["description"])
        return jsonify(movie.to_dict()), 201

    @app.route("/api/movies/<movie_id>/vote", methods=["POST"])
    def api_vote(movie_id):
        try:
            vote_type = parse_vote(_payload().get("vote"))
        except ValidationError as err:
            return _validation_response(err)

        movie = store.vote(movie_id, vote_type)
        if movie is None:
            return _not_found()
        return jsonify(movie.to_dict())

    @app.route("/api/movies/<movie_id>", methods=["DELETE"])
    def api_delete_movie(movie_id):
        entry = store.delete_movie(movie_id)
        if entry is None:
            return _not_found()
        return jsonify(_undo_payload(entry))

    # ---------------- API MOVIE NIGHTS ----------------
    @app.route("/api/nights")
    def api_nights():
        return jsonify([n.to_dict() for n in store.list_movie_nights()])

    @app.route("/api/nights", methods=["POST"])
    def api_schedule():
        try:
            movie_id, night_date = validate_schedule(_payload())
        except ValidationError as err:
            return _validation_response(err)

        night = store.schedule(movie_id, night_date)
        if night is None:
            return _not_found()
        return jsonify(night.to_dict()), 201

    @app.route("/api/nights/<night_id>", methods=["DELETE"])
    def api_remove_movie_night(night_id):
        entry = store.remove_movie_night(night_id)
        if entry is None:
            return _not_found()
        return jsonify(_undo_payload(entry))

    @app.route("/api/nights/<night_id>/attendees", methods=["POST"])
    def api_add_attendee(night_id):
        try:
            attendee = store.add_attendee(night_id, _payload().get("name"))
        except ValidationError as err:
            return _validation_response(err)

        if attendee is None:
            return _not_found()
        return jsonify(attendee.to_dict()), 201

    @app.route("/api/nights/<night_id>/attendees/<attendee_id>/toggle", methods=["POST"])
    def api_toggle_attendance(night_id, attendee_id):
        attendee = store.toggle_attendance(night_id, attendee_id)
        if attendee is None:
            return _not_found()
        return jsonify(attendee.to_dict())

    @app.route("/api/nights/<night_id>/attendees/<attendee_id>", methods=["DELETE"])
    def api_remove_attendee(night_id, attendee_id):
        if not store.remove_attendee(night_id, attendee_id):
            return _not_found()
        return jsonify({"ok": True})

    # ---------------- API UNDO ----------------
    @app.route("/api/undo")
    def api_pending_undo():
        return jsonify([_undo_payload(e) for e in store.undo_buffer().pending()])

    @app.route("/api/undo/<token>", methods=["POST"])
    def api_undo(token):
        entry = store.undo(token)
        if entry is None:
            return _not_found()
        return jsonify({"ok": True, "kind": entry.kind, "label": entry.label, "restored": entry.restored})

    return app
