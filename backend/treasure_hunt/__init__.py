from flask import Flask
from flask_cors import CORS
from flask_sock import Sock
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)
sock = Sock()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)
    # Plain WebSocket route for clients that speak one JSON message per frame
    sock.init_app(flask_app)

    # One authoritative session per app, shared by every transport
    from treasure_hunt.services.game import GameSession
    from treasure_hunt.services.game.scheduler import make_reset_scheduler
    flask_app.extensions['treasure_hunt'] = GameSession.from_config(
        flask_app.config,
        schedule=make_reset_scheduler(flask_app),
        logger=flask_app.logger,
    )

    from treasure_hunt.main import main
    flask_app.register_blueprint(main)

    from treasure_hunt.websocket_events import ws
    flask_app.register_blueprint(ws)

    from treasure_hunt.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('stream-server')
    @click.option('--host', default=None, help='Interface to listen on.')
    @click.option('--port', default=None, type=int, help='TCP port for console clients.')
    def stream_server_command(host, port):
        """Runs only the newline-delimited JSON gateway in the foreground."""
        from treasure_hunt.stream_server import StreamGateway
        gateway = StreamGateway.from_app(flask_app)
        if host:
            gateway.host = host
        if port is not None:
            gateway.port = port
        click.echo(f'Stream gateway starting on {gateway.host}:{gateway.port}')
        try:
            gateway.serve_forever()
        except KeyboardInterrupt:
            click.echo('Stream gateway stopped.')

    flask_app.cli.add_command(stream_server_command)

    return flask_app
