from flask import Blueprint, jsonify, request, current_app
import time

from scoreboard.runtime import broadcast_state, get_board


scores = Blueprint('scores', __name__)

_last_lane_action: dict[str, float] = {}

def _debounced(action: str, lane: int) -> bool:
    try:
        debounce_ms = int(current_app.config.get('MUTATION_DEBOUNCE_MS', 0))
    except (TypeError, ValueError):
        debounce_ms = 0
    if debounce_ms <= 0:
        return False
    key = f"{action}:{lane}"
    now = time.time() * 1000.0
    last = _last_lane_action.get(key, 0)
    if now - last < debounce_ms:
        return True
    _last_lane_action[key] = now
    return False

def _lane_mutation(action: str, lane: int):
    state = get_board().state
    # only real lanes get a debounce slot
    if not 0 <= lane < state.lanes:
        reason = f'Lane must be between 0 and {state.lanes - 1}'
        return jsonify({'error': reason, 'state': state.to_dict()}), 400

    if _debounced(action, lane):
        return jsonify({'message': 'debounced'}), 202

    mutate = state.increment if action == 'increment' else state.decrement
    if not mutate(lane):
        if state.is_locked:
            reason = 'Scoreboard is locked'
        elif action == 'increment':
            reason = f'Lane {lane} is already at {state.max_level}'
        else:
            reason = f'Lane {lane} is already at 0'
        return jsonify({'error': reason, 'state': state.to_dict()}), 400

    current_app.logger.info(f"[{action}] lane={lane} level={state.levels[lane]}")
    broadcast_state(state)
    return jsonify(state.to_dict())


@scores.route('/state', methods=['GET'])
def get_state():
    return jsonify(get_board().state.to_dict())


@scores.route('/lanes/<int(signed=True):lane>/increment', methods=['POST'])
def increment_lane(lane):
    return _lane_mutation('increment', lane)


@scores.route('/lanes/<int(signed=True):lane>/decrement', methods=['POST'])
def decrement_lane(lane):
    return _lane_mutation('decrement', lane)


@scores.route('/reset', methods=['POST'])
def reset_today():
    data = request.get_json(silent=True) or {}
    if data.get('confirm') is not True:
        return jsonify({'error': 'Reset must be confirmed'}), 400
    state = get_board().state
    if state.is_locked:
        return jsonify({'error': 'Scoreboard is locked', 'state': state.to_dict()}), 400
    state.reset_today()
    current_app.logger.info(f"[reset] day={state.day_key}")
    broadcast_state(state)
    payload = state.to_dict()
    payload['message'] = "Today's scores have been reset"
    return jsonify(payload)


@scores.route('/lock', methods=['POST'])
def toggle_lock():
    state = get_board().state
    is_locked = state.toggle_lock()
    current_app.logger.info(f"[lock] is_locked={is_locked}")
    broadcast_state(state)
    payload = state.to_dict()
    payload['message'] = 'Scoreboard locked' if is_locked else 'Scoreboard unlocked'
    return jsonify(payload)


@scores.route('/visibility', methods=['POST'])
def visibility_changed():
    data = request.get_json(silent=True) or {}
    visible = data.get('visible')
    if not isinstance(visible, bool):
        return jsonify({'error': 'visible must be true or false'}), 400
    board = get_board()
    board.scheduler.on_visibility_change(visible)
    return jsonify({
        'visible': visible,
        'reconciling': board.scheduler.is_reconciling,
        'state': board.state.to_dict(),
    })
