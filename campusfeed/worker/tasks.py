"""
Background Task Runner

Runs work detached from the request/response cycle:
- comment counter updates
- content moderation passes

Tasks go onto a FIFO queue drained by daemon worker threads. A failing task
is logged and dropped; nothing is ever reported back to the submitter.
"""

import threading
import time
from dataclasses import dataclass, field
from queue import Empty, Queue
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..logging_config import worker_logger


@dataclass
class Task:
    """A unit of detached work"""
    name: str
    func: Callable[..., Any]
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class TaskRunner:
    """Queue plus worker threads for fire-and-forget work."""

    POLL_INTERVAL = 0.5

    def __init__(self, workers: int = 2):
        self.workers = max(1, workers)
        self.queue: "Queue[Task]" = Queue()
        self.running = False
        self.completed = 0
        self.failed = 0
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()

    def submit(self, name: str, func: Callable[..., Any], *args, **kwargs) -> None:
        """Queue a task; returns immediately."""
        self.queue.put(Task(name=name, func=func, args=args, kwargs=kwargs))

    def start_background(self) -> bool:
        """Start worker threads (non-blocking for FastAPI)"""
        if self.running:
            return False

        self.running = True
        self._threads = [
            threading.Thread(target=self._work_loop, daemon=True, name=f"task-worker-{i}")
            for i in range(self.workers)
        ]
        for thread in self._threads:
            thread.start()

        worker_logger.info("Task runner started", workers=self.workers)
        return True

    def join(self) -> None:
        """Block until every queued task has finished."""
        if not self.running:
            self.run_pending()
            return
        self.queue.join()

    def stop(self, drain: bool = True, timeout: Optional[float] = 5.0) -> bool:
        """Stop workers, optionally letting queued tasks finish first"""
        if not self.running:
            return False

        if drain:
            self.join()
        self.running = False
        for thread in self._threads:
            thread.join(timeout=timeout)
        self._threads = []

        worker_logger.info("Task runner stopped", completed=self.completed, failed=self.failed)
        return True

    def run_pending(self) -> int:
        """Run queued tasks on the calling thread; returns how many ran."""
        ran = 0
        while True:
            try:
                task = self.queue.get_nowait()
            except Empty:
                return ran
            self._run(task)
            ran += 1

    def _work_loop(self):
        while self.running:
            try:
                task = self.queue.get(timeout=self.POLL_INTERVAL)
            except Empty:
                continue
            self._run(task)

    def _run(self, task: Task):
        start = time.time()
        try:
            task.func(*task.args, **task.kwargs)
            with self._lock:
                self.completed += 1
            worker_logger.debug(
                f"{task.name} completed",
                task=task.name,
                duration_ms=round((time.time() - start) * 1000, 2),
                queued_ms=round((start - task.submitted_at) * 1000, 2),
            )
        except Exception as e:
            with self._lock:
                self.failed += 1
            worker_logger.error(f"{task.name} failed", error=e, task=task.name)
        finally:
            self.queue.task_done()

    def get_status(self) -> dict:
        """Get runner status"""
        return {
            "running": self.running,
            "workers": len(self._threads),
            "queue_size": self.queue.qsize(),
            "completed": self.completed,
            "failed": self.failed,
        }
