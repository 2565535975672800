# timeline/recorder.py
import logging
from typing import List, TYPE_CHECKING
from notes.model import EventKind, RecordedEvent
from session import Session
from timeline.scheduler import Scheduler, Task

if TYPE_CHECKING:
    from audio.engine import PlaybackEngine

class Recorder:
    """
    One-take recorder:
    - arm() 清空並重新開始計時（每次 arm 都丟掉上一段）
    - play() 依 offset 排程回放；回放觸發的 play/stop 不會再被錄進去
    - stop_playback() 取消尚未觸發的回放
    """
    def __init__(self, session: Session, scheduler: Scheduler, cancel_on_arm: bool = False):
        self.session = session
        self.scheduler = scheduler
        self.cancel_on_arm = cancel_on_arm
        self.engine: "PlaybackEngine | None" = None
        self._events: List[RecordedEvent] = []
        self._tasks: List[Task] = []

    def attach(self, engine: "PlaybackEngine"):
        self.engine = engine
        engine.sink = self.append

    @property
    def armed(self) -> bool:
        return self.session.recording

    @property
    def events(self) -> List[RecordedEvent]:
        return list(self._events)

    def append(self, ev: RecordedEvent):
        self._events.append(ev)

    def arm(self):
        if self.cancel_on_arm:
            self.stop_playback()
        self._events.clear()
        self.session.record_start = self.scheduler.clock()
        self.session.recording = True
        logging.info("Recording armed")

    def disarm(self):
        self.session.recording = False
        logging.info("Recording stopped (%d events)", len(self._events))

    def set_armed(self, flag: bool):
        if flag: self.arm()
        else: self.disarm()

    def toggle(self) -> bool:
        self.set_armed(not self.session.recording)
        return self.session.recording

    def play(self) -> List[Task]:
        if self.engine is None:
            raise RuntimeError("Recorder.play() before attach()")
        eng = self.engine
        tasks = []
        for ev in self._events:
            fn = eng.play if ev.kind == EventKind.START else eng.stop
            tasks.append(self.scheduler.call_later(ev.offset, fn, ev.midi, False))
        self._tasks = [t for t in self._tasks if not (t.done or t.cancelled)] + tasks
        logging.info("Playback scheduled: %d events", len(tasks))
        return tasks

    @property
    def playing(self) -> bool:
        return any(not (t.done or t.cancelled) for t in self._tasks)

    def stop_playback(self) -> int:
        n = 0
        for t in self._tasks:
            if not (t.done or t.cancelled):
                t.cancel(); n += 1
        self._tasks.clear()
        return n
