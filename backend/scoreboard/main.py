from flask import Blueprint, jsonify

from scoreboard.runtime import get_board

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the classroom scoreboard server!'})

@main.route('/health')
def health():
    board = get_board()
    return jsonify({
        'status': 'healthy',
        'day_key': board.state.day_key,
        'rollover_armed': board.scheduler.is_armed,
    })
