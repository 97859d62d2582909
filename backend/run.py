import atexit

from scoreboard import create_app, socketio
from scoreboard.runtime import shutdown_board

app = create_app()
atexit.register(shutdown_board, app)

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    socketio.run(app, debug=True)
