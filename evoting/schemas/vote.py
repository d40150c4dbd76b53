from marshmallow import Schema, fields, validate

class VoteCastSchema(Schema):
    election_id = fields.Int(required=True, strict=True, validate=validate.Range(min=1))
    candidate_id = fields.Int(required=True, strict=True, validate=validate.Range(min=1))

class VoteStatusSchema(Schema):
    has_voted = fields.Bool(required=True)
    vote_id = fields.Int(allow_none=True)
    candidate_id = fields.Int(allow_none=True)

class VoteReadSchema(Schema):
    id = fields.Int()
    election_id = fields.Int()
    voter_id = fields.Int()
    candidate_id = fields.Int()
    created_at = fields.DateTime()
