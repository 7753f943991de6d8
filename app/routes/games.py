"""
Game Routes - listings, detail, search and game writes
"""

from flask import Blueprint, request

from api_responses import success_response
from middleware.auth import access_required
from schemas import GameSpec
from routes import catalog_service, int_arg, json_body

games_bp = Blueprint("games", __name__, url_prefix="/api/games")


@games_bp.route("", methods=["GET"])
def list_games():
    return success_response(catalog_service().list_games())


@games_bp.route("/recent", methods=["GET"])
def recent_games():
    return success_response(catalog_service().get_recent())


@games_bp.route("/upcoming", methods=["GET"])
def upcoming_games():
    return success_response(catalog_service().get_upcoming())


@games_bp.route("/top-rated", methods=["GET"])
def top_rated_games():
    return success_response(catalog_service().get_top_rated(int_arg("limit")))


@games_bp.route("/most-popular", methods=["GET"])
def most_popular_games():
    return success_response(catalog_service().get_most_popular(int_arg("limit")))


@games_bp.route("/search", methods=["GET"])
def search_games():
    return success_response(catalog_service().search(request.args.get("q", "")))


@games_bp.route("/<int:game_id>", methods=["GET"])
def game_detail(game_id):
    return success_response(catalog_service().get_game_detail(game_id))


@games_bp.route("/<int:game_id>/rating", methods=["GET"])
def game_rating(game_id):
    return success_response(catalog_service().get_game_aggregate(game_id))


@games_bp.route("/<int:game_id>/interactions", methods=["GET"])
def game_interactions(game_id):
    return success_response(catalog_service().list_interactions_for_game(game_id))


@games_bp.route("", methods=["POST"])
@access_required("admin")
def create_game():
    spec = GameSpec.from_payload(json_body())
    return success_response(catalog_service().create_game(spec), message="Game created", status_code=201)


@games_bp.route("/<int:game_id>", methods=["PUT"])
@access_required("admin")
def update_game(game_id):
    spec = GameSpec.from_payload(json_body())
    return success_response(catalog_service().update_game(game_id, spec), message="Game updated")


@games_bp.route("/<int:game_id>", methods=["DELETE"])
@access_required("admin")
def delete_game(game_id):
    catalog_service().delete_game(game_id)
    return success_response(message="Game deleted")
