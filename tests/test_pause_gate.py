import threading
import time
import unittest

from backend.pause_gate import Interrupted, PauseGate
from backend.sleeper import CancellableSleep


class PauseGateTests(unittest.TestCase):
    def test_await_resume_returns_immediately_when_open(self):
        gate = PauseGate()
        self.assertFalse(gate.is_paused())
        self.assertEqual(gate.await_resume(then=lambda: "ran"), "ran")

    def test_resume_wakes_every_waiter(self):
        gate = PauseGate()
        gate.pause()
        released = []
        blocked = []

        def waiter(idx):
            gate.await_resume(on_block=lambda: blocked.append(idx))
            released.append(idx)

        threads = [threading.Thread(target=waiter, args=(i,)) for i in range(3)]
        for t in threads:
            t.start()
        time.sleep(0.1)
        self.assertEqual(released, [])
        self.assertEqual(sorted(set(blocked)), [0, 1, 2])

        gate.resume()
        for t in threads:
            t.join(1.0)
        self.assertEqual(sorted(released), [0, 1, 2])

    def test_cancel_unblocks_waiter(self):
        gate = PauseGate()
        gate.pause()
        cancel = threading.Event()
        outcome = []

        def waiter():
            try:
                gate.await_resume(cancel)
            except Interrupted:
                outcome.append("interrupted")

        t = threading.Thread(target=waiter)
        t.start()
        time.sleep(0.05)
        cancel.set()
        gate.wake_all()
        t.join(1.0)
        self.assertFalse(t.is_alive())
        self.assertEqual(outcome, ["interrupted"])
        self.assertTrue(gate.is_paused())


class CancellableSleepTests(unittest.TestCase):
    def test_full_duration_when_never_paused(self):
        sleeper = CancellableSleep(PauseGate())
        start = time.monotonic()
        self.assertTrue(sleeper.sleep(150))
        self.assertGreaterEqual(time.monotonic() - start, 0.14)

    def test_pause_mid_sleep_returns_within_one_poll(self):
        gate = PauseGate()
        sleeper = CancellableSleep(gate)
        timer = threading.Timer(0.2, gate.pause)
        timer.start()
        start = time.monotonic()
        completed = sleeper.sleep(3000)
        elapsed = time.monotonic() - start
        timer.join()
        self.assertFalse(completed)
        self.assertLess(elapsed, 0.2 + 0.1 + 0.1)

    def test_already_paused_returns_without_sleeping(self):
        gate = PauseGate()
        gate.pause()
        start = time.monotonic()
        self.assertFalse(CancellableSleep(gate).sleep(5000))
        self.assertLess(time.monotonic() - start, 0.05)

    def test_interrupt_raises(self):
        interrupt = threading.Event()
        sleeper = CancellableSleep(PauseGate(), interrupt)
        threading.Timer(0.05, interrupt.set).start()
        start = time.monotonic()
        with self.assertRaises(Interrupted):
            sleeper.sleep(5000)
        self.assertLess(time.monotonic() - start, 0.5)

    def test_settle_ignores_pause_but_not_interrupt(self):
        gate = PauseGate()
        gate.pause()
        interrupt = threading.Event()
        sleeper = CancellableSleep(gate, interrupt)
        start = time.monotonic()
        sleeper.settle(100)
        self.assertGreaterEqual(time.monotonic() - start, 0.09)

        interrupt.set()
        with self.assertRaises(Interrupted):
            sleeper.settle(1000)


if __name__ == "__main__":
    unittest.main()
