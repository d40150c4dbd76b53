from flask import Blueprint, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ...schemas.results import ResultPublishSchema, ResultReadSchema
from ...services.results import ResultStore
from ...utils.rbac import roles_required, ROLE_ADMIN
from ...utils.validation import validate_or_abort

results_bp = Blueprint("results", __name__)

store = ResultStore()

result_publish_schema = ResultPublishSchema()
result_read_many_schema = ResultReadSchema(many=True)


@results_bp.get("/<int:election_id>")
@jwt_required()
@swag_from({
    "tags": ["Results"],
    "summary": "Published results for an election",
    "description": "One row per candidate per publish; empty until the election has been published.",
    "responses": {200: {"description": "Results"}, 401: {"description": "Unauthorized"}},
})
def get_results(election_id):
    rows = store.get_results(election_id)
    return {
        "election_id": election_id,
        "total_votes": sum(r.vote_count for r in rows),
        "results": result_read_many_schema.dump(rows),
    }, 200


@results_bp.post("/<int:election_id>/publish")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Results"],
    "summary": "Persist per-candidate counts for an election",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"counts": {"type": "object", "example": {"10": 3, "11": 5}}},
            "required": ["counts"],
        },
    }],
    "responses": {200: {}, 400: {}, 403: {}},
})
def publish_results(election_id):
    payload = request.get_json(silent=True) or {}
    data = validate_or_abort(result_publish_schema, payload)

    store.publish_results(election_id, data["counts"])
    return {"message": "Results published", "election_id": election_id}, 200
