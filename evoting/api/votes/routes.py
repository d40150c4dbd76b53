from flask import Blueprint, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ...schemas.vote import VoteCastSchema, VoteReadSchema, VoteStatusSchema
from ...services.elections import ElectionRegistry
from ...services.votes import VoteLedger
from ...utils.rbac import roles_required, current_principal_id, ROLE_ADMIN, ROLE_VOTER
from ...utils.validation import validate_or_abort

votes_bp = Blueprint("votes", __name__)

registry = ElectionRegistry()
ledger = VoteLedger()

vote_cast_schema = VoteCastSchema()
vote_read_schema = VoteReadSchema()
vote_read_many_schema = VoteReadSchema(many=True)
vote_status_schema = VoteStatusSchema()


@votes_bp.post("/")
@jwt_required()
@roles_required(ROLE_VOTER)
@swag_from({
    "tags": ["Voting"],
    "summary": "Cast a vote as the authenticated voter",
    "parameters": [{
        "in": "body",
        "name": "body",
        "required": True,
        "schema": {
            "type": "object",
            "properties": {
                "election_id": {"type": "integer", "example": 1},
                "candidate_id": {"type": "integer", "example": 10},
            },
            "required": ["election_id", "candidate_id"],
        },
    }],
    "responses": {
        201: {"description": "Vote recorded"},
        400: {"description": "Validation error / candidate not in election"},
        404: {"description": "Election not found"},
        409: {"description": "ALREADY_VOTED, or election not open (INVALID_STATE)"},
    },
})
def cast_vote():
    payload = request.get_json(silent=True) or {}
    data = validate_or_abort(vote_cast_schema, payload)
    voter_id = current_principal_id()

    registry.ensure_votable(data["election_id"], data["candidate_id"])
    vote = ledger.cast_vote(voter_id, data["election_id"], data["candidate_id"])

    return {"message": "Vote recorded", "vote": vote_read_schema.dump(vote)}, 201


@votes_bp.get("/mine")
@jwt_required()
@roles_required(ROLE_VOTER)
@swag_from({"tags": ["Voting"], "summary": "Votes cast by the authenticated voter", "responses": {200: {}, 401: {}}})
def my_votes():
    votes = ledger.get_votes_by_voter(current_principal_id())
    return {"votes": vote_read_many_schema.dump(votes)}, 200


@votes_bp.get("/<int:election_id>/status")
@jwt_required()
@roles_required(ROLE_VOTER)
@swag_from({"tags": ["Voting"], "summary": "Has the authenticated voter voted in this election", "responses": {200: {}}})
def vote_status(election_id):
    vote = ledger.has_voted(current_principal_id(), election_id)
    return vote_status_schema.dump({
        "has_voted": vote is not None,
        "vote_id": vote.id if vote else None,
        "candidate_id": vote.candidate_id if vote else None,
    }), 200


@votes_bp.get("/<int:election_id>/tally")
@jwt_required()
@roles_required(ROLE_ADMIN)
@swag_from({
    "tags": ["Voting"],
    "summary": "Per-candidate vote counts (candidates without votes are omitted)",
    "responses": {200: {}, 403: {}},
})
def tally(election_id):
    counts = ledger.tally(election_id)
    return {
        "election_id": election_id,
        "counts": {str(cid): n for cid, n in sorted(counts.items())},
        "total_votes": sum(counts.values()),
    }, 200
