import logging

logger = logging.getLogger(__name__)


class TimerHandle:
    """One pending one-shot callback. ``deadline`` is epoch seconds.

    ``wakeup`` is an optional event the worker waits on; cancelling sets it
    so a sleeping worker exits straight away.
    """

    def __init__(self, deadline: float, callback, name: str = 'timer', wakeup=None):
        self.deadline = deadline
        self.callback = callback
        self.name = name
        self.wakeup = wakeup
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True
        if self.wakeup is not None:
            self.wakeup.set()

    def fire(self) -> None:
        self.fired = True
        self.callback()


class SocketIOTimers:
    """One-shot timers run as Socket.IO background tasks.

    - Waits against the wall-clock deadline, so a process suspended past
      its deadline fires as soon as it resumes
    - A cancelled handle never fires; its worker wakes up and exits
    - Callbacks run inside an app context
    - ``inline`` runs the callback immediately, for tests
    """

    def __init__(self, app, socketio, clock, heartbeat_sec: int = 0, inline: bool = False):
        self.app = app
        self.socketio = socketio
        self.clock = clock
        self.heartbeat_sec = heartbeat_sec
        self.inline = inline

    def start(self, delay_sec: float, callback, name: str = 'timer') -> TimerHandle:
        now = self.clock.now().timestamp()
        handle = TimerHandle(now + max(0.0, delay_sec), callback, name)
        logger.info(f"[timer-set] name={name} delay={delay_sec:.3f}s deadline={handle.deadline:.3f}")
        if self.inline:
            self._fire(handle)
        else:
            # event type matches the server's async mode (threading, eventlet or gevent)
            handle.wakeup = self.socketio.server.eio.create_event()
            self.socketio.start_background_task(self._worker, handle)
        return handle

    def _worker(self, handle: TimerHandle) -> None:
        while not handle.cancelled:
            remaining = handle.deadline - self.clock.now().timestamp()
            if remaining <= 0:
                break
            step = min(self.heartbeat_sec, remaining) if self.heartbeat_sec > 0 else remaining
            if handle.wakeup.wait(step):
                break
            if self.heartbeat_sec > 0:
                logger.info(f"[timer-heartbeat] name={handle.name} remaining={max(0.0, remaining - step):.0f}s")
        self._fire(handle)

    def _fire(self, handle: TimerHandle) -> None:
        if handle.cancelled:
            logger.info(f"[timer-abort] name={handle.name} cancelled before firing")
            return
        with self.app.app_context():
            logger.info(f"[timer-fire] name={handle.name}")
            handle.fire()
