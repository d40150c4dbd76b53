from marshmallow import Schema, fields, validate

class ResultPublishSchema(Schema):
    # JSON object keys are always strings; the result store coerces them
    counts = fields.Dict(
        keys=fields.Str(validate=validate.Regexp(r"^[1-9]\d*$", error="Candidate id must be a positive integer")),
        values=fields.Int(strict=True, validate=validate.Range(min=0)),
        required=True,
    )

class ResultReadSchema(Schema):
    id = fields.Int()
    election_id = fields.Int()
    candidate_id = fields.Int()
    vote_count = fields.Int()
    calculated_at = fields.DateTime()

class PublishReportSchema(Schema):
    election_id = fields.Int(required=True)
    status = fields.Str(allow_none=True)
    counts = fields.Dict(keys=fields.Str(), values=fields.Int())
    completed_steps = fields.List(fields.Str())
