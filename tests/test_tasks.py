"""
Tests for the background task runner.
"""
import threading

from campusfeed.worker.tasks import TaskRunner


class TestTaskRunner:
    """Test detached execution."""

    def test_runs_tasks_in_background(self):
        runner = TaskRunner(workers=2)
        runner.start_background()
        done = []
        lock = threading.Lock()

        def work(n):
            with lock:
                done.append(n)

        for i in range(10):
            runner.submit("work", work, i)
        runner.join()

        assert sorted(done) == list(range(10))
        assert runner.get_status()["completed"] == 10
        assert runner.stop() is True
        assert runner.stop() is False

    def test_failures_are_logged_not_raised(self):
        runner = TaskRunner(workers=1)
        runner.start_background()
        done = []

        def explode():
            raise RuntimeError("boom")

        runner.submit("explode", explode)
        runner.submit("after", done.append, "ok")
        runner.join()
        runner.stop()

        assert done == ["ok"]
        status = runner.get_status()
        assert status["failed"] == 1
        assert status["completed"] == 1

    def test_join_without_workers_runs_inline(self):
        runner = TaskRunner()
        done = []
        runner.submit("work", done.append, 1)
        runner.submit("work", done.append, 2)

        runner.join()
        assert done == [1, 2]
        assert runner.get_status()["queue_size"] == 0
