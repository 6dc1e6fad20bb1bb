"""
EventStudio API: Flask application
Events, seat booking, QR check-in and admin analytics.
"""

import logging
import os

from dotenv import load_dotenv
from flasgger import Swagger
from flask import Flask, jsonify

from eventstudio.errors import register_error_handlers
from eventstudio.extensions import db
from eventstudio.security import configure_jwt

load_dotenv()


def _database_uri():
    if os.environ.get('DATABASE_URL'):
        return os.environ['DATABASE_URL']
    db_user = os.environ.get('DB_USER', 'eventstudio')
    db_pass = os.environ.get('DB_PASS', 'password')
    db_host = os.environ.get('DB_HOST', 'localhost')
    db_name = os.environ.get('DB_NAME', 'eventstudio')
    return f"postgresql://{db_user}:{db_pass}@{db_host}/{db_name}"


def create_app(test_config=None):
    app = Flask(__name__)

    # Configuration
    app.config['SQLALCHEMY_DATABASE_URI'] = _database_uri()
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['JWT_SECRET_KEY'] = os.environ.get('JWT_SECRET', 'dev-secret-change-me')
    app.config['APP_ENV'] = os.environ.get('APP_ENV', 'development')
    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO').upper()
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=getattr(logging, app.config['LOG_LEVEL'], logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Initialize Extensions
    db.init_app(app)
    configure_jwt(app, production=app.config['APP_ENV'] == 'production')
    register_error_handlers(app)

    swagger_template = {
        "info": {"title": "EventStudio API", "version": "1.0.0"},
        "securityDefinitions": {
            "Bearer": {"type": "apiKey", "name": "Authorization", "in": "header"}
        },
    }
    Swagger(app, template=swagger_template)

    # Register Blueprints
    from eventstudio.routes.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    from eventstudio.routes.events import event_bp
    app.register_blueprint(event_bp, url_prefix='/api/events')

    from eventstudio.routes.tickets import ticket_bp
    app.register_blueprint(ticket_bp, url_prefix='/api/tickets')

    from eventstudio.routes.analytics import analytics_bp
    app.register_blueprint(analytics_bp, url_prefix='/api/analytics')

    @app.route('/')
    def index():
        return jsonify({"service": "eventstudio", "status": "running"})

    @app.route('/health')
    def health():
        try:
            db.session.execute(db.text('SELECT 1'))
            return {"service": "eventstudio", "status": "healthy"}, 200
        except Exception as e:
            return {"service": "eventstudio", "status": "unhealthy", "error": str(e)}, 503

    with app.app_context():
        from eventstudio import models  # noqa: F401
        db.create_all()

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
