"""Tests for the bounded worker pool."""
import logging
import threading
import time

from common.concurrency import run_with_concurrency


class TestRunWithConcurrency:

    def test_results_in_input_order(self):
        # Later items finish first
        def work(item, index):
            time.sleep(0.01 * (3 - index))
            return item * 10

        assert run_with_concurrency([1, 2, 3], work, 3) == [10, 20, 30]

    def test_index_passed(self):
        assert run_with_concurrency(["a", "b"], lambda item, index: f"{index}{item}", 2) == ["0a", "1b"]

    def test_empty(self):
        assert run_with_concurrency([], lambda item, index: item, 4) == []

    def test_failures_dropped_and_logged(self, caplog):
        def work(item, index):
            if item == "bad":
                raise RuntimeError("boom")
            return item.upper()

        with caplog.at_level(logging.WARNING):
            results = run_with_concurrency(["ok", "bad", "fine"], work, 2)

        assert results == ["OK", "FINE"]
        assert "Task for item 1 failed: RuntimeError: boom" in caplog.text

    def test_label_used_in_log(self, caplog):
        def work(item, index):
            raise ValueError("nope")

        with caplog.at_level(logging.WARNING):
            run_with_concurrency(["users"], work, 1, label=lambda item: f"collection {item}")

        assert "Task for collection users failed" in caplog.text

    def test_max_concurrency_respected(self):
        lock = threading.Lock()
        active = 0
        peak = 0

        def work(item, index):
            nonlocal active, peak
            with lock:
                active += 1
                peak = max(peak, active)
            time.sleep(0.02)
            with lock:
                active -= 1
            return item

        assert run_with_concurrency(list(range(8)), work, 2) == list(range(8))
        assert peak <= 2

    def test_non_positive_limit_still_runs(self):
        assert run_with_concurrency([1, 2], lambda item, index: item, 0) == [1, 2]
