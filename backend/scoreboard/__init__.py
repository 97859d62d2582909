from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config, clock=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])

    db.init_app(flask_app)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.scores import scores
    # Mount score routes under /api to match the display's API client
    flask_app.register_blueprint(scores, url_prefix='/api/scores')

    from scoreboard.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from scoreboard.runtime import build_board, get_board
    with flask_app.app_context():
        import scoreboard.models  # noqa: F401
        db.create_all()
        build_board(flask_app, socketio, clock=clock)

    @click.command('scores-reset')
    def scores_reset_command():
        """Zeroes today's lane scores."""
        with flask_app.app_context():
            state = get_board().state
            if state.is_locked:
                click.echo('Scoreboard is locked; unlock it before resetting.')
                return
            state.reset_today()
            click.echo(f'Scores for {state.day_key} have been reset!')

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database, then starts a fresh day."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            get_board().state.reset_for_new_day()
            click.echo('Database has been reset!')

    flask_app.cli.add_command(scores_reset_command)
    flask_app.cli.add_command(db_reset_command)

    @flask_app.errorhandler(404)
    def not_found(_exc):
        return jsonify({'error': 'Not found'}), 404

    return flask_app
