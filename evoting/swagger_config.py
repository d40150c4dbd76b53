def swagger_template(app=None):
    title = "E-Voting Core API"
    version = "1.0.0"

    if app:
        title = app.config.get("SWAGGER_TITLE", title)
        version = app.config.get("SWAGGER_VERSION", version)

    return {
        "swagger": "2.0",
        "info": {
            "title": title,
            "version": version,
            "description": "Election lifecycle, vote ledger, results and the publish sequence.",
        },
        "securityDefinitions": {
            "BearerAuth": {
                "type": "apiKey",
                "name": "Authorization",
                "in": "header",
                "description": "JWT issued by the auth service: Bearer <token> (role claim ADMIN or VOTER)"
            }
        },
        "security": [{"BearerAuth": []}],
        "definitions": {
            "ErrorResponse": {
                "type": "object",
                "properties": {
                    "success": {"type": "boolean", "example": False},
                    "error": {
                        "type": "object",
                        "properties": {
                            "code": {"type": "string", "example": "ALREADY_VOTED"},
                            "message": {"type": "string", "example": "You have already voted in this election"},
                            "details": {"type": "object"}
                        }
                    },
                    "request_id": {"type": "string"}
                }
            },
            "PublishStepFailure": {
                "type": "object",
                "description": "error.details when code is PUBLISH_STEP_FAILED",
                "properties": {
                    "election_id": {"type": "integer"},
                    "failed_step": {"type": "string", "enum": ["close", "tally", "publish", "archive"]},
                    "completed_steps": {"type": "array", "items": {"type": "string"}},
                    "election_status": {"type": "string", "example": "CLOSED"},
                    "reason": {"type": "string"}
                }
            }
        }
    }
