from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from .extensions import db, login_manager, migrate, rq


def create_app(config_object='config.Config'):
    """App factory. Tests pass ``config.TestConfig``."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    rq.init_app(app)

    @login_manager.user_loader
    def load_user(user_id):
        from .models.user import User
        return db.session.get(User, int(user_id))

    from .blueprints.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from .blueprints.decisions import bp as decisions_bp
    app.register_blueprint(decisions_bp, url_prefix="/decisions")

    from .blueprints.interviews import bp as interviews_bp
    app.register_blueprint(interviews_bp, url_prefix="/interviews")

    from .blueprints.sessions import bp as sessions_bp
    app.register_blueprint(sessions_bp, url_prefix="/sessions")

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"error": e.name, "message": e.description}), e.code

    @app.get('/health')
    def health():
        return jsonify({"status": "ok"})

    return app
