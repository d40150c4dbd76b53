from flask import Blueprint, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ...models.election import Election
from ...schemas.election import ElectionCreateSchema, ElectionStatusSchema, ElectionReadSchema
from ...services.elections import ElectionRegistry
from ...utils.rbac import roles_required, ROLE_ADMIN
from ...utils.validation import validate_or_abort

elections_bp = Blueprint("elections", __name__)

registry = ElectionRegistry()

election_create_schema = ElectionCreateSchema()
election_status_schema = ElectionStatusSchema()
election_read_schema = ElectionReadSchema()
election_read_many_schema = ElectionReadSchema(many=True)


@elections_bp.post("/")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Elections"],
    "summary": "Create an election (always starts DRAFT)",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "title": {"type": "string", "example": "Student council 2026"},
                "description": {"type": "string"},
                "start_at": {"type": "string", "format": "date-time"},
                "end_at": {"type": "string", "format": "date-time"},
                "candidate_ids": {"type": "array", "items": {"type": "integer"}, "example": [10, 11]},
            },
            "required": ["title"],
        },
    }],
    "responses": {201: {"description": "Created"}, 400: {"description": "Validation error"}, 403: {"description": "Forbidden"}},
})
def create_election():
    payload = request.get_json(silent=True) or {}
    data = validate_or_abort(election_create_schema, payload)

    election = registry.create_election(
        title=data["title"],
        description=data.get("description"),
        start_at=data.get("start_at"),
        end_at=data.get("end_at"),
        candidate_ids=data.get("candidate_ids") or [],
    )
    return {"election": election_read_schema.dump(election)}, 201


@elections_bp.get("/")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({"tags": ["Elections"], "summary": "List all elections (admin)", "responses": {200: {}, 403: {}}})
def list_elections():
    elections = registry.list_elections()
    return {"elections": election_read_many_schema.dump(elections)}, 200


@elections_bp.get("/public")
@jwt_required()
@swag_from({"tags": ["Elections"], "summary": "List OPEN elections", "responses": {200: {}, 401: {}}})
def public_elections():
    elections = registry.get_public_elections()
    return {"elections": election_read_many_schema.dump(elections)}, 200


@elections_bp.get("/<int:election_id>")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({"tags": ["Elections"], "summary": "Get election details", "responses": {200: {}, 404: {}}})
def get_election(election_id):
    election = registry.get_election(election_id)
    return {"election": election_read_schema.dump(election)}, 200


@elections_bp.post("/<int:election_id>/candidates/<int:candidate_id>")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Elections"],
    "summary": "Add a candidate (DRAFT only, idempotent)",
    "responses": {200: {}, 404: {}, 409: {"description": "Election is not DRAFT"}},
})
def add_candidate(election_id, candidate_id):
    election = registry.add_candidate(election_id, candidate_id)
    return {"election": election_read_schema.dump(election)}, 200


@elections_bp.put("/<int:election_id>/status")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Elections"],
    "summary": "Set election status",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {"status": {"type": "string", "enum": list(Election.VALID_STATUSES)}},
            "required": ["status"],
        },
    }],
    "responses": {200: {}, 400: {}, 404: {}, 409: {"description": "Transition not allowed"}},
})
def update_status(election_id):
    payload = request.get_json(silent=True) or {}
    data = validate_or_abort(election_status_schema, payload)

    election = registry.update_status(election_id, data["status"])
    return {"election": election_read_schema.dump(election)}, 200


@elections_bp.put("/<int:election_id>/open")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({"tags": ["Elections"], "summary": "Open election for voting", "responses": {200: {}, 404: {}, 409: {}}})
def open_election(election_id):
    election = registry.update_status(election_id, Election.STATUS_OPEN)
    return {"election": election_read_schema.dump(election)}, 200


@elections_bp.put("/<int:election_id>/close")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({"tags": ["Elections"], "summary": "Close election", "responses": {200: {}, 404: {}, 409: {}}})
def close_election(election_id):
    election = registry.update_status(election_id, Election.STATUS_CLOSED)
    return {"election": election_read_schema.dump(election)}, 200


@elections_bp.delete("/<int:election_id>")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({"tags": ["Elections"], "summary": "Delete a DRAFT election", "responses": {204: {}, 404: {}, 409: {}}})
def delete_election(election_id):
    registry.delete_election(election_id)
    return "", 204
