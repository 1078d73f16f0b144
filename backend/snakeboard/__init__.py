from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
import json
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    # Unknown rule versions fail at startup, not on the first submission
    from snakeboard.services.replay import get_rules
    get_rules(flask_app.config.get('RULES_VERSION'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Ensure the StoredValue table is known to SQLAlchemy metadata
    from snakeboard import models  # noqa: F401

    from snakeboard.routes import main
    flask_app.register_blueprint(main)

    from snakeboard.api.leaderboard import api
    flask_app.register_blueprint(api, url_prefix='/api')

    from snakeboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('leaderboard-reset')
    def leaderboard_reset_command():
        """Creates tables (SQL backend) and empties the stored leaderboard."""
        from snakeboard.services.leaderboard import get_leaderboard
        with flask_app.app_context():
            if (flask_app.config.get('LEADERBOARD_BACKEND') or '').lower() == 'sql':
                db.create_all()
            get_leaderboard(flask_app).reset()
            print('Leaderboard has been reset!')

    @click.command('replay-file')
    @click.argument('path', type=click.Path(exists=True, dir_okay=False))
    def replay_file_command(path):
        """Replays a saved submission JSON without checking its ticket."""
        from snakeboard.services.replay import replay
        from snakeboard.services.verification import parse_submission
        with open(path) as f:
            try:
                sub = parse_submission(json.load(f))
            except ValueError as exc:
                raise click.ClickException(f'Bad submission file: {exc}')
        result = replay(sub.seed, sub.tick_count, sub.inputs,
                        rules=get_rules(flask_app.config.get('RULES_VERSION')))
        click.echo(json.dumps(result.to_dict()))

    @click.command('issue-ticket')
    @click.argument('name')
    def issue_ticket_command(name):
        """Prints a signed session ticket for NAME."""
        from snakeboard.services.errors import ConfigurationError
        from snakeboard.services.tickets import TicketAuthority, sanitize_name
        try:
            authority = TicketAuthority(flask_app.config.get('SESSION_HMAC_SECRET'))
        except ConfigurationError as exc:
            raise click.ClickException(str(exc))
        click.echo(json.dumps(authority.issue(sanitize_name(name)).to_dict()))

    flask_app.cli.add_command(leaderboard_reset_command)
    flask_app.cli.add_command(replay_file_command)
    flask_app.cli.add_command(issue_ticket_command)

    return flask_app
