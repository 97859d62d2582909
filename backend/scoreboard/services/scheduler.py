import logging

logger = logging.getLogger(__name__)

DEFAULT_VISIBILITY_DEBOUNCE_MS = 1000


class DayScheduler:
    """Rolls the score state over at each local midnight.

    Holds at most two pending timers, each as a single handle:
    - midnight: fires at the next zone-aware midnight, rolls over when the
      day changed, then re-arms for the following midnight
    - resume: debounced check after the display becomes visible again,
      catching midnights missed while timers were suspended

    Re-arming either one cancels the handle it replaces.
    """

    def __init__(self, state, timers, on_rollover=None, debounce_ms: int = DEFAULT_VISIBILITY_DEBOUNCE_MS):
        self.state = state
        self.timers = timers
        self.on_rollover = on_rollover
        self.debounce_ms = debounce_ms
        self._midnight = None
        self._resume = None

    @property
    def is_armed(self) -> bool:
        return self._midnight is not None and self._midnight.pending

    @property
    def is_reconciling(self) -> bool:
        return self._resume is not None and self._resume.pending

    def rollover(self) -> None:
        self.state.reset_for_new_day()
        if self.on_rollover is not None:
            self.on_rollover()

    def schedule_next_rollover(self) -> int:
        """Arm the midnight timer, replacing any pending one. Returns the delay in ms."""
        self._cancel_midnight()
        delay_ms = self.state.ms_until_next_midnight()
        self._midnight = self.timers.start(delay_ms / 1000.0, self._on_midnight, name='midnight')
        logger.info(f"[rollover-armed] day={self.state.day_key} delay_ms={delay_ms}")
        return delay_ms

    def _on_midnight(self) -> None:
        today = self.state.today_key()
        if self.state.day_key != today:
            logger.info(f"[rollover-fire] {self.state.day_key} -> {today}")
            self.rollover()
        else:
            # woke early, or a resume check already rolled this day over
            logger.info(f"[rollover-skip] day={today} unchanged")
        self.schedule_next_rollover()

    def on_visibility_change(self, visible: bool) -> None:
        if visible:
            self.reconcile_on_resume()

    def reconcile_on_resume(self) -> None:
        """Debounced day-key check after the display regains visibility."""
        self._cancel_resume()
        self._resume = self.timers.start(self.debounce_ms / 1000.0, self._on_resume_settled, name='resume')

    def _on_resume_settled(self) -> None:
        today = self.state.today_key()
        if self.state.day_key == today:
            return
        logger.info(f"[resume-rollover] {self.state.day_key} -> {today}")
        self.rollover()
        # the pending midnight delay was computed against the old day
        if self.is_armed:
            self.schedule_next_rollover()

    def _cancel_midnight(self) -> None:
        if self._midnight is not None:
            self._midnight.cancel()
            self._midnight = None

    def _cancel_resume(self) -> None:
        if self._resume is not None:
            self._resume.cancel()
            self._resume = None

    def cancel(self) -> None:
        """Release both timers. Call on teardown."""
        self._cancel_midnight()
        self._cancel_resume()
        logger.info("[scheduler-cancel] pending timers released")
