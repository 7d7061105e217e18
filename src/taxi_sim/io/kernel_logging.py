# io/kernel_logging.py
import json
import logging
import sys
from dataclasses import asdict, is_dataclass

from taxi_sim.io.business_events import to_biz
from taxi_sim.io.recorder import Recorder
from taxi_sim.sim.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def _default_json_logger(name="taxi_sim", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class KernelLogging(NoopHooks):
    """
    One place to shape and emit structured logs for both engine and business events.
    """

    BUSINESS = {
        "NetworkRebuilt",
        "IntersectionModeChanged",
        "DeliverySpawned",
        "DeliverySpawnSkipped",
        "DeliveryPickedUp",
        "DeliveryCompleted",
        "TaxisCollided",
        "TaxiPurchased",
        "RushHourStarted",
        "ShiftEnded",
        "PauseToggled",
    }

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1000,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.sample_every = run_id, debug, max(1, sample_every)
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)
        self._processed = 0

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"run_id": self.run_id, **extra}})

    def _shape_event(self, ev, want_name: bool = False):
        # Normalize a few common fields to keep logs compact & consistent
        name = type(ev).__name__
        base = {"t": getattr(ev, "t", None)}
        for f in ("taxi_id", "delivery_id", "node_id"):
            if hasattr(ev, f):
                base[f] = getattr(ev, f)
        if is_dataclass(ev):
            evd = asdict(ev)
            for k in base:
                evd.pop(k, None)
            if evd:
                base["data"] = evd
        return (name, base) if want_name else base

    # --------------------------------------------------------

    # engine lifecycle

    def run_start(self, *, until_ms: float, tick_ms: float):
        self._emit("INFO", "run_start", until_ms=until_ms, tick_ms=tick_ms)

    def run_end(self, *, ticks: int, **extra):
        self._emit("INFO", "run_end", ticks=ticks, processed=self._processed, **extra)

    def tick_end(self, *, tick: int, now_ms: float, events: int, ms: float):
        if self.debug and (tick % self.sample_every) == 0:
            self._emit("DEBUG", "tick", tick=tick, t=now_ms, events=events, ms=round(ms, 3))

    def dispatch(self, ev, *, seq: int, handlers: int):
        self._processed += 1
        name, extra = self._shape_event(ev, want_name=True)
        level = "INFO" if name in self.BUSINESS else ("DEBUG" if self.debug else None)
        if level:
            self._emit(level, name, **extra, seq=seq, handlers=handlers)
        biz = to_biz(ev, run_id=self.run_id, seq=seq)
        if biz is not None:
            self.biz(biz)

    def error(self, *, reason: str, **extra):
        self._emit("ERROR", "kernel_error", reason=reason, **extra)

    # ------------- Business Event Reporting --------------------------

    def biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)
