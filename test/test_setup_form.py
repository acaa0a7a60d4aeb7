# Unit tests for the setup form's loading progress
import threading
import unittest

from backend.tutor_prompts import LOADING_MESSAGES
from components.setup_form import run_with_progress


class TestRunWithProgress(unittest.TestCase):
    def test_lines_cycle_one_at_a_time(self):
        done = threading.Event()
        steps = []

        def on_step(line):
            steps.append(line)
            if len(steps) == len(LOADING_MESSAGES) + 1:
                done.set()

        def work(value):
            done.wait(5)
            return value * 2

        result = run_with_progress(work, 21, on_step=on_step, interval=0.01)

        self.assertEqual(result, 42)
        self.assertEqual(steps[:len(LOADING_MESSAGES)], list(LOADING_MESSAGES))
        self.assertEqual(steps[len(LOADING_MESSAGES)], LOADING_MESSAGES[0])

    def test_first_line_shown_before_work_finishes(self):
        release = threading.Event()
        steps = []

        def on_step(line):
            steps.append(line)
            release.set()

        def work():
            release.wait(5)
            return "ok"

        self.assertEqual(run_with_progress(work, on_step=on_step, interval=0.01), "ok")
        self.assertEqual(steps[0], LOADING_MESSAGES[0])

    def test_error_is_reraised(self):
        def work():
            raise ValueError("boom")

        with self.assertRaises(ValueError):
            run_with_progress(work, on_step=lambda line: None, interval=0.01)


if __name__ == "__main__":
    unittest.main()
