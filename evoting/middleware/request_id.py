import uuid
from flask import g, request, current_app

REQUEST_ID_HEADER = "X-Request-Id"

def init_request_id(app):
    @app.before_request
    def _assign_request_id():
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        g.request_id = rid
        current_app.logger.debug("request_id=%s %s %s", rid, request.method, request.path)

    @app.after_request
    def _add_request_id_header(response):
        if hasattr(g, "request_id"):
            response.headers[REQUEST_ID_HEADER] = g.request_id
        return response
