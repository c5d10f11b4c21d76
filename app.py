from flask import Flask, jsonify, request
from dotenv import load_dotenv
import os

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import db  # noqa: E402  (load_dotenv needs to run first)
from logging_config import setup_logging  # noqa: E402
from errors import StorageError  # noqa: E402


def create_app(test_config: dict | None = None) -> Flask:
    """Application factory for the breakdown tracker."""

    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        # overrides must land before db.init_app() reads the URI
        app.config.update(test_config)

    setup_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_JSON", False))

    # init extensions
    db.init_app(app)

    # blueprints
    from modules.inventory import bp as inventory_bp
    from modules.breakdowns import bp as breakdowns_bp
    from modules.kpi import bp as kpi_bp

    app.register_blueprint(inventory_bp)
    app.register_blueprint(breakdowns_bp)
    app.register_blueprint(kpi_bp)

    from ui_routes import ui
    app.register_blueprint(ui)  # dashboard "/"

    # DB
    with app.app_context():
        # models must be imported before create_all()
        from modules.inventory import models as inventory_models  # noqa: F401
        from modules.breakdowns import models as breakdowns_models  # noqa: F401

        db.create_all()

    @app.errorhandler(StorageError)
    def storage_error(exc):
        # details are already in the log; callers get a generic message
        message = "Database Error: the request could not be completed."
        wants_json = "/api" in request.path or (
            request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html
        )
        if wants_json:
            return jsonify(ok=False, error=message), 500
        return message, 500

    from seed import seed_demo_command
    app.cli.add_command(seed_demo_command)

    app.logger.info("Breakdown tracker ready")
    return app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=os.getenv("FLASK_DEBUG", "1") == "1")
