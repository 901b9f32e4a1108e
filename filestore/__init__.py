from flask import Flask, jsonify
from werkzeug.exceptions import InternalServerError

from .errors import FilestoreError, InternalError
from .extensions import db, login_manager, migrate, rq


def create_app(test_config=None):
    """App factory. ``test_config`` overrides ``config.Config`` key by key."""
    app = Flask(__name__)
    app.config.from_object('config.Config')
    if test_config:
        app.config.update(test_config)

    db.init_app(app)
    migrate.init_app(app, db, directory='alembic')
    login_manager.init_app(app)
    rq.init_app(app)

    @login_manager.request_loader
    def load_user_from_token(request):
        from .services import session_store
        from .services.users import find_user
        user_id = session_store().resolve(request.headers.get('X-Token'))
        if user_id is None:
            return None
        return find_user(db.session, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify(error='Unauthorized'), 401

    @app.errorhandler(FilestoreError)
    def handle_filestore_error(err):
        if isinstance(err, InternalError):
            app.logger.error('internal error: %r', err.__cause__ or err)
        return jsonify(error=err.message), err.status_code

    @app.errorhandler(InternalServerError)
    def handle_unexpected(err):
        app.logger.error('unhandled error: %r', getattr(err, 'original_exception', err))
        return jsonify(error='Internal Server Error'), 500

    from .blueprints.main import bp as main_bp
    from .blueprints.auth import bp as auth_bp
    from .blueprints.users import bp as users_bp
    from .blueprints.files import bp as files_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(files_bp, url_prefix='/files')

    return app
