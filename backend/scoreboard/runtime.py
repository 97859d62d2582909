"""Per-application scoreboard wiring.

One ScoreState and one DayScheduler are built for each Flask app and kept in
``app.extensions['scoreboard']``. Request handlers, socket handlers and CLI
commands reach them through ``get_board()``.
"""
from dataclasses import dataclass

from flask import current_app

from scoreboard import socketio as _socketio
from scoreboard.services.clock import SystemClock
from scoreboard.services.scheduler import DayScheduler
from scoreboard.services.state import ScoreState
from scoreboard.services.storage import build_store
from scoreboard.services.timers import SocketIOTimers

EXTENSION_KEY = 'scoreboard'
SCOREBOARD_ROOM = 'scoreboard'
NAMESPACE = '/ws'


@dataclass
class Scoreboard:
    state: ScoreState
    scheduler: DayScheduler


def broadcast_state(state: ScoreState) -> None:
    _socketio.emit('state_update', state.to_dict(), to=SCOREBOARD_ROOM, namespace=NAMESPACE)


def build_board(app, socketio, clock=None) -> Scoreboard:
    """Create, load and (optionally) arm the board for ``app``. Needs an app context."""
    cfg = app.config
    clock = clock or SystemClock()
    state = ScoreState(
        build_store(cfg.get('STORAGE_BACKEND', 'sql')),
        clock=clock,
        lanes=int(cfg.get('SCOREBOARD_LANES', 6)),
        max_level=int(cfg.get('SCOREBOARD_MAX_LEVEL', 20)),
        timezone=cfg.get('SCOREBOARD_TIMEZONE', 'Asia/Taipei'),
        storage_key=cfg.get('SCOREBOARD_STORAGE_KEY', 'classScoreboard.v1'),
    )
    timers = SocketIOTimers(
        app,
        socketio,
        clock,
        heartbeat_sec=int(cfg.get('TIMER_HEARTBEAT_SEC', 0)),
        inline=bool(cfg.get('TESTING')),
    )
    scheduler = DayScheduler(
        state,
        timers,
        on_rollover=lambda: broadcast_state(state),
        debounce_ms=int(cfg.get('VISIBILITY_DEBOUNCE_MS', 1000)),
    )

    restored = state.load_or_initialize()
    app.logger.info(f"[board-init] day={state.day_key} restored={restored} lanes={state.lanes}")
    # inline timers would fire the midnight callback straight away, so never arm under TESTING
    if cfg.get('ROLLOVER_SCHEDULER_ENABLED', True) and not cfg.get('TESTING'):
        scheduler.schedule_next_rollover()

    board = Scoreboard(state=state, scheduler=scheduler)
    app.extensions[EXTENSION_KEY] = board
    return board


def get_board() -> Scoreboard:
    return current_app.extensions[EXTENSION_KEY]


def shutdown_board(app) -> None:
    board = app.extensions.get(EXTENSION_KEY)
    if board is not None:
        board.scheduler.cancel()
