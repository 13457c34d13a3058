import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Board rules, fixed for the lifetime of the process
    GRID_SIZE = int(os.environ.get('GRID_SIZE', '10'))
    TREASURE_COUNT = int(os.environ.get('TREASURE_COUNT', '5'))
    WIN_CONDITION = int(os.environ.get('WIN_CONDITION', '3'))
    # Delay between a win and the board reset (seconds)
    RESET_DELAY_SEC = float(os.environ.get('RESET_DELAY_SEC', '5'))
    # Socket.IO / HTTP listener
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS', 'http://localhost:5173,http://127.0.0.1:5173'
        ).split(',') if o.strip()
    ]
    # Newline-delimited JSON listener for console clients
    STREAM_ENABLED = os.environ.get('STREAM_ENABLED', '1') not in ('0', 'false', 'False', '')
    STREAM_HOST = os.environ.get('STREAM_HOST', '0.0.0.0')
    STREAM_PORT = int(os.environ.get('STREAM_PORT', '3001'))
    # Frames buffered per stream client before it is dropped as stalled
    STREAM_OUTBOX_LIMIT = int(os.environ.get('STREAM_OUTBOX_LIMIT', '256'))
