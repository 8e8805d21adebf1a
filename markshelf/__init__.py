from flask import Flask

from markshelf.api import api_bp
from markshelf.auth import auth_bp
from markshelf.backend import EXTENSION_KEY, build_backend
from markshelf.config import Config
from markshelf.extensions import db, login_manager, migrate
from markshelf.web import web_bp


def create_app(config_object=Config, backend=None):
    app = Flask(__name__, template_folder="../templates")
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    app.extensions[EXTENSION_KEY] = backend or build_backend(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(web_bp)
    app.register_blueprint(api_bp)

    @app.cli.command("init-db")
    def init_db_command():
        db.create_all()
        print("Initialized markshelf database.")

    @app.context_processor
    def inject_globals():
        return {"app_name": "markshelf"}

    with app.app_context():
        db.create_all()

    return app
