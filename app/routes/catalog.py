"""
Catalog Routes - platforms, developers and genres
"""

from flask import Blueprint, request

from api_responses import success_response
from constants import KIND_DEVELOPER, KIND_GENRE, KIND_PLATFORM
from middleware.auth import access_required
from schemas import parse_reference_fields
from routes import json_body, reference_service

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")

# URL segment -> reference kind
COLLECTIONS = {
    "platforms": KIND_PLATFORM,
    "developers": KIND_DEVELOPER,
    "genres": KIND_GENRE,
}

_COLLECTION_RULE = "/<any(platforms, developers, genres):collection>"


@catalog_bp.route(_COLLECTION_RULE, methods=["GET"])
def list_references(collection):
    return success_response(reference_service().list_all(COLLECTIONS[collection]))


@catalog_bp.route(_COLLECTION_RULE + "/search", methods=["GET"])
def search_references(collection):
    return success_response(reference_service().search(COLLECTIONS[collection], request.args.get("q", "")))


@catalog_bp.route(_COLLECTION_RULE + "/<int:item_id>", methods=["GET"])
def get_reference(collection, item_id):
    return success_response(reference_service().get(COLLECTIONS[collection], item_id))


@catalog_bp.route(_COLLECTION_RULE + "/<int:item_id>/games", methods=["GET"])
def reference_games(collection, item_id):
    return success_response(reference_service().games_for(COLLECTIONS[collection], item_id))


@catalog_bp.route("/platforms/manufacturer/<manufacturer>", methods=["GET"])
def platforms_by_manufacturer(manufacturer):
    return success_response(reference_service().platforms_by_manufacturer(manufacturer))


@catalog_bp.route("/platforms/newest", methods=["GET"])
def platforms_newest_first():
    return success_response(reference_service().platforms_newest_first())


@catalog_bp.route("/developers/country/<country>", methods=["GET"])
def developers_by_country(country):
    return success_response(reference_service().developers_by_country(country))


@catalog_bp.route("/developers/oldest", methods=["GET"])
def developers_oldest_first():
    return success_response(reference_service().developers_oldest_first())


@catalog_bp.route(_COLLECTION_RULE, methods=["POST"])
@access_required("admin")
def create_reference(collection):
    kind = COLLECTIONS[collection]
    fields = parse_reference_fields(kind, json_body())
    return success_response(reference_service().create(kind, fields), status_code=201)


@catalog_bp.route(_COLLECTION_RULE + "/<int:item_id>", methods=["PUT"])
@access_required("admin")
def update_reference(collection, item_id):
    kind = COLLECTIONS[collection]
    fields = parse_reference_fields(kind, json_body())
    return success_response(reference_service().update(kind, item_id, fields))


@catalog_bp.route(_COLLECTION_RULE + "/<int:item_id>", methods=["DELETE"])
@access_required("admin")
def delete_reference(collection, item_id):
    reference_service().delete(COLLECTIONS[collection], item_id)
    return success_response(message="Deleted")
