from dataclasses import dataclass
from typing import TYPE_CHECKING

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

if TYPE_CHECKING:
    from geoguess.gateway import SocketTransport
    from geoguess.services.games.lobby import LobbyBroadcaster
    from geoguess.services.games.registry import RoomRegistry
    from geoguess.services.games.words import WordPool
    from geoguess.socketio_events import SocketEvents

socketio = SocketIO(async_mode=None)


@dataclass
class GameServices:
    """Process-wide game state owned by one Flask app."""
    word_pool: 'WordPool'
    registry: 'RoomRegistry'
    lobby: 'LobbyBroadcaster'
    transport: 'SocketTransport'
    events: 'SocketEvents'


def _allowed_origins(value):
    if isinstance(value, (list, tuple)):
        return list(value)
    origins = [o.strip() for o in str(value or '*').split(',') if o.strip()]
    return '*' if origins in ([], ['*']) else origins


def create_app(config_class=Config, word_pool=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from geoguess.gateway import SocketTransport
    from geoguess.services.games import MODES
    from geoguess.services.games.lobby import LobbyBroadcaster
    from geoguess.services.games.registry import RoomRegistry
    from geoguess.services.games.words import WordPool
    from geoguess.socketio_events import register_socketio_handlers

    cfg = flask_app.config
    # A broken dataset is fatal: fail here rather than on the first create_room
    if word_pool is None:
        word_pool = WordPool.from_file(cfg.get('WORD_POOL_PATH') or None)
    registry = RoomRegistry(
        word_pool,
        code_length=int(cfg.get('ROOM_CODE_LENGTH', 6)),
        max_attempts=int(cfg.get('MAX_ATTEMPTS', 6)),
        chat_capacity=int(cfg.get('MAX_ROOM_MESSAGES', 50)),
        max_message_length=int(cfg.get('MAX_MESSAGE_LENGTH', 500)),
        validate_guesses=bool(cfg.get('VALIDATE_GUESSES', True)),
    )
    transport = SocketTransport(socketio, namespace=cfg.get('SOCKETIO_NAMESPACE', '/'))
    lobby = LobbyBroadcaster(
        transport,
        capacity=int(cfg.get('MAX_LOBBY_MESSAGES', 50)),
        max_length=int(cfg.get('MAX_MESSAGE_LENGTH', 500)),
    )
    events = register_socketio_handlers(registry, lobby, transport, flask_app.logger)
    flask_app.extensions['geoguess'] = GameServices(word_pool, registry, lobby, transport, events)
    flask_app.logger.info(f"[startup] word pool sizes={word_pool.sizes()} namespace={transport.namespace}")

    from geoguess.routes import main
    flask_app.register_blueprint(main)

    @click.command('pool-stats')
    def pool_stats_command():
        """Prints the number of locations available in each mode."""
        for mode, size in word_pool.sizes().items():
            click.echo(f'{mode}: {size}')

    @click.command('draw-word')
    @click.option('--mode', type=click.Choice(MODES), default='both', show_default=True)
    def draw_word_command(mode):
        """Draws a sample target word for MODE."""
        click.echo(word_pool.draw(mode))

    flask_app.cli.add_command(pool_stats_command)
    flask_app.cli.add_command(draw_word_command)

    return flask_app
