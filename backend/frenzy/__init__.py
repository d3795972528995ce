from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

# The coordinator module imports db and socketio from this package
from frenzy.services.rooms.coordinator import RoomCoordinator  # noqa: E402

coordinator = RoomCoordinator()


def _allowed_origins(config):
    raw = config.get('CORS_ALLOWED_ORIGINS') or '*'
    if raw.strip() == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = _allowed_origins(flask_app.config)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from frenzy.main import main
    flask_app.register_blueprint(main)

    from frenzy.api.results import results
    # Mounted under /api to match the front-end history client
    flask_app.register_blueprint(results, url_prefix='/api')

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    coordinator.init_app(flask_app, socketio, namespace=namespace)

    from frenzy.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=namespace)

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the game result tables."""
        import frenzy.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
