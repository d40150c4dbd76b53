from dotenv import load_dotenv
from .errors import register_error_handlers
from flask import Flask
from .config import Config
from .extensions import db, migrate, jwt, ma
from flasgger import Swagger
from .swagger_config import swagger_template
from .middleware.request_id import init_request_id

load_dotenv()

def create_app(config_class=Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    Swagger(app, template=swagger_template(app))
    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ma.init_app(app)

    # Middleware + errors
    init_request_id(app)
    register_error_handlers(app)

    # Blueprint imports
    from .api.elections.routes import elections_bp
    from .api.votes.routes import votes_bp
    from .api.results.routes import results_bp
    from .api.admin.routes import admin_bp

    # Blueprints
    app.register_blueprint(elections_bp, url_prefix="/api/elections")
    app.register_blueprint(votes_bp, url_prefix="/api/votes")
    app.register_blueprint(results_bp, url_prefix="/api/results")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    # Health check
    @app.get("/health")
    def health():
        return {"status": "ok"}, 200

    return app
