"""
Interaction Routes - ratings, reviews and played flags
"""

from flask import Blueprint

from api_responses import success_response
from auth import current_caller
from middleware.auth import access_required
from schemas import InteractionSpec
from routes import catalog_service, json_body

interactions_bp = Blueprint("interactions", __name__, url_prefix="/api")


@interactions_bp.route("/interactions", methods=["POST"])
@access_required("user")
def create_interaction():
    spec = InteractionSpec.from_payload(json_body())
    caller = current_caller()
    return success_response(
        catalog_service().create_interaction(caller.user_id, spec), message="Interaction created", status_code=201
    )


@interactions_bp.route("/interactions/<int:interaction_id>", methods=["GET"])
def get_interaction(interaction_id):
    return success_response(catalog_service().get_interaction(interaction_id))


@interactions_bp.route("/interactions/<int:interaction_id>", methods=["PUT"])
@access_required("user")
def update_interaction(interaction_id):
    spec = InteractionSpec.from_payload(json_body(), require_game=False)
    return success_response(
        catalog_service().update_interaction(current_caller(), interaction_id, spec), message="Interaction updated"
    )


@interactions_bp.route("/interactions/<int:interaction_id>", methods=["DELETE"])
@access_required("user")
def delete_interaction(interaction_id):
    catalog_service().delete_interaction(current_caller(), interaction_id)
    return success_response(message="Interaction deleted")


@interactions_bp.route("/users/<int:user_id>/interactions", methods=["GET"])
def user_interactions(user_id):
    return success_response(catalog_service().list_interactions_for_user(user_id))


@interactions_bp.route("/users/<int:user_id>/played", methods=["GET"])
def user_played_games(user_id):
    return success_response(catalog_service().list_played_games(user_id))


@interactions_bp.route("/users/<int:user_id>/games/<int:game_id>/interaction", methods=["GET"])
def user_game_interaction(user_id, game_id):
    return success_response(catalog_service().get_user_interaction(user_id, game_id))
