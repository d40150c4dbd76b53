from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from ..models.election import Election


class ElectionCreateSchema(Schema):
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    description = fields.Str(required=False, allow_none=True)
    start_at = fields.DateTime(required=False, allow_none=True)
    end_at = fields.DateTime(required=False, allow_none=True)
    candidate_ids = fields.List(
        fields.Int(strict=True, validate=validate.Range(min=1)),
        required=False,
        load_default=list,
    )

    @validates_schema
    def end_after_start(self, data, **kwargs):
        start_at, end_at = data.get("start_at"), data.get("end_at")
        if start_at and end_at and end_at <= start_at:
            raise ValidationError("end_at must be after start_at", field_name="end_at")


class ElectionStatusSchema(Schema):
    status = fields.Str(required=True, validate=validate.OneOf(Election.VALID_STATUSES))


class ElectionReadSchema(Schema):
    id = fields.Int()
    title = fields.Str()
    description = fields.Str(allow_none=True)
    status = fields.Str()
    start_at = fields.DateTime(allow_none=True)
    end_at = fields.DateTime(allow_none=True)
    candidate_ids = fields.List(fields.Int())
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
