from treasure_hunt import create_app, socketio
from treasure_hunt.stream_server import StreamGateway

app = create_app()

if __name__ == '__main__':
    # Console clients share the same session through the stream gateway
    if app.config.get('STREAM_ENABLED'):
        gateway = StreamGateway.from_app(app)
        gateway.bind()
        socketio.start_background_task(gateway.serve_forever)
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
