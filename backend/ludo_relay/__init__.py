from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(value):
    if not value or value.strip() == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config_class=Config, registry=None, relay=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS', '*'))
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room state is owned by this app instance, not by the module
    from ludo_relay.services.rooms import RoomRegistry, TurnRelay
    if registry is None:
        registry = RoomRegistry(
            max_players=flask_app.config.get('MAX_PLAYERS', 4),
            code_length=flask_app.config.get('ROOM_CODE_LENGTH', 6),
        )
    if relay is None:
        relay = TurnRelay(registry, min_players=flask_app.config.get('MIN_PLAYERS', 2))
    flask_app.extensions['room_registry'] = registry
    flask_app.extensions['turn_relay'] = relay

    from ludo_relay.routes import main
    flask_app.register_blueprint(main)

    # Handlers bind to the freshly initialized socketio server
    from ludo_relay.socketio_events import register_socketio_handlers
    register_socketio_handlers(registry, relay)

    @click.command('play')
    @click.option('--name', default='Player', show_default=True, help='Display name.')
    @click.option('--server', 'server_url', default=None, help='Relay URL (defaults to SERVER_URL).')
    @click.option('--room', 'room_code', default=None, help='Join this room instead of creating one.')
    @click.option('--rolls', default=6, show_default=True, help='Rolls to make on your turns.')
    @click.option('--offline', is_flag=True, help='Skip the relay and play against a bot.')
    @click.option('--fast', is_flag=True, help='No bot pauses in offline mode.')
    def play_command(name, server_url, room_code, rolls, offline, fast):
        """Play a terminal game through the relay, or offline against a bot."""
        from ludo_relay.client import GameClient, play_game
        client = GameClient(
            server_url=server_url or flask_app.config['SERVER_URL'],
            connect_timeout=flask_app.config['CONNECT_TIMEOUT_SEC'],
            request_timeout=flask_app.config['REQUEST_TIMEOUT_SEC'],
            offline=offline,
            sleep=(lambda _seconds: None) if fast else None,
        )
        play_game(client, name, rolls=rolls, room_code=room_code, echo=click.echo)

    flask_app.cli.add_command(play_command)

    return flask_app
