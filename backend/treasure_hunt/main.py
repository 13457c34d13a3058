from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the treasure hunt server!'})

@main.route('/api/state')
def game_state():
    """Current board as the server sees it: players, treasures and rules."""
    session = current_app.extensions['treasure_hunt']
    return jsonify(session.snapshot())
