from flask import Flask, current_app
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging
import os

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()

BACKEND_EXTENSION = 'stockdesk.backend'


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['JWT_TOKEN_LOCATION'] = ['headers', 'cookies']
    app.config['JWT_COOKIE_CSRF_PROTECT'] = os.getenv('JWT_COOKIE_CSRF_PROTECT', '0') == '1'
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///dev.db')
    app.config['BACKEND_API_URL'] = os.getenv('BACKEND_API_URL', 'http://localhost:5000/api/v1')
    app.config['BACKEND_API_TOKEN'] = os.getenv('BACKEND_API_TOKEN')
    app.config['BACKEND_TIMEOUT_SECONDS'] = float(os.getenv('BACKEND_TIMEOUT_SECONDS', '10'))
    app.config['CONSOLE_CURRENCY'] = os.getenv('CONSOLE_CURRENCY', 'GHS')
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.getLogger('stockdesk').setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)

    from .services.backend_client import BackendClient
    from .services.session import FETCH_EXTENSION, SESSIONS_EXTENSION, FetchTracker, SessionRegistry
    # BACKEND_CLIENT lets tests/callers inject any object with the BackendClient interface
    app.extensions[BACKEND_EXTENSION] = app.config.get('BACKEND_CLIENT') or BackendClient(
        app.config['BACKEND_API_URL'], timeout=app.config['BACKEND_TIMEOUT_SECONDS'],
        token=app.config['BACKEND_API_TOKEN'],
    )
    app.extensions[SESSIONS_EXTENSION] = SessionRegistry()
    app.extensions[FETCH_EXTENSION] = FetchTracker()

    from .routes.auth import auth_bp
    from .routes.dashboard import dash_bp
    from .routes.catalog import catalog_bp
    from .routes.messaging import msg_bp
    from .routes.users import users_bp
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(dash_bp, url_prefix='/dashboard')
    app.register_blueprint(catalog_bp, url_prefix='/dashboard')
    app.register_blueprint(msg_bp, url_prefix='/dashboard/messaging')
    app.register_blueprint(users_bp, url_prefix='/dashboard/users')

    @app.route('/')
    def login_page():
        # Unauthenticated gate redirects land here
        return {'page': 'login', 'login_url': '/auth/login'}

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    from .utils.errors import BackendError, describe_error

    @app.errorhandler(BackendError)
    def handle_backend_error(e):  # type: ignore
        app.logger.warning('Backend error %s (%s): %s', e.status, e.code, e.message)
        return {
            'error': {
                'status': 502,
                'title': 'Bad Gateway',
                'detail': describe_error(e.status, e.details, fallback=e.message),
                'code': e.code,
            }
        }, 502

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    return app


def get_db():
    return SessionLocal()


def get_backend():
    return current_app.extensions[BACKEND_EXTENSION]
