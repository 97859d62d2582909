import os


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///scoreboard.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Board layout
    SCOREBOARD_LANES = int(os.environ.get('SCOREBOARD_LANES', '6'))
    SCOREBOARD_MAX_LEVEL = int(os.environ.get('SCOREBOARD_MAX_LEVEL', '20'))
    SCOREBOARD_TIMEZONE = os.environ.get('SCOREBOARD_TIMEZONE', 'Asia/Taipei')
    # Persistence: 'sql' keeps the record in the kv_store table, 'memory' keeps it per process
    SCOREBOARD_STORAGE_KEY = os.environ.get('SCOREBOARD_STORAGE_KEY', 'classScoreboard.v1')
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'sql')
    # Midnight rollover timer; disable to drive rollover from visibility events only
    ROLLOVER_SCHEDULER_ENABLED = _env_bool('ROLLOVER_SCHEDULER_ENABLED', True)
    # Delay before checking the day key after the display becomes visible again (ms)
    VISIBILITY_DEBOUNCE_MS = int(os.environ.get('VISIBILITY_DEBOUNCE_MS', '1000'))
    # Optional: debounce lane buttons (ms). 0 disables.
    MUTATION_DEBOUNCE_MS = int(os.environ.get('MUTATION_DEBOUNCE_MS', '0'))
    # Optional: heartbeat interval for timer worker logs (sec). 0 disables.
    TIMER_HEARTBEAT_SEC = int(os.environ.get('TIMER_HEARTBEAT_SEC', '0'))
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173',
        ).split(',')
        if origin.strip()
    ]
