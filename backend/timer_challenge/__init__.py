from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('CORS_ORIGINS', [])
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from timer_challenge.services.challenges import ManualScheduler, SocketIOScheduler, build_configs
    # Fail at startup on a bad challenge list rather than on every request
    build_configs(flask_app.config.get('CHALLENGES', []))

    # Ticks are driven by hand in tests, by Socket.IO background tasks otherwise
    if flask_app.config.get('TESTING'):
        flask_app.extensions['tick_scheduler'] = ManualScheduler()
    else:
        flask_app.extensions['tick_scheduler'] = SocketIOScheduler(socketio)

    # Import and register blueprints here
    from timer_challenge.main import main
    flask_app.register_blueprint(main)

    from timer_challenge.api.challenges import challenges
    flask_app.register_blueprint(challenges, url_prefix='/api/challenges')

    # Register Socket.IO event handlers
    from timer_challenge.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('challenges')
    def list_challenges_command():
        """Lists the configured timer challenges."""
        from timer_challenge.services.challenges import build_configs
        for config in build_configs(flask_app.config.get('CHALLENGES', [])):
            click.echo(f'{config.key}\t{config.title}\t{config.target_label}')

    flask_app.cli.add_command(list_challenges_command)

    return flask_app
