import random
import time
import unittest

from backend.controller import AfkController
from backend.hardware import HardwareController, Key
from backend.settings import Timings

# long startup delay keeps the sequencer thread alive without pressing anything
IDLE = Timings(startup_delay_ms=10_000, poll_interval_ms=5)

FAST = Timings(
    startup_delay_ms=0,
    countdown_steps=1,
    countdown_tick_ms=5,
    settle_ms=5,
    key_hold_range=(0.01, 0.02),
    sequence_wait_range=(0.02, 0.03),
    anti_idle_wait_range=(0.03, 0.05),
    anti_idle_pause_range=(0.02, 0.04),
    anti_idle_stabilize_ms=5,
    poll_interval_ms=5,
)


class FakeHotkey:
    def __init__(self):
        self.pending = 0

    def press(self, times=1):
        self.pending += times

    def was_pressed(self):
        if self.pending:
            self.pending -= 1
            return True
        return False


def wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


class AfkControllerTests(unittest.TestCase):
    def setUp(self):
        self.hw = HardwareController(auto_connect=False)
        self.messages = []
        self.alive = True
        self.liveness_calls = 0
        self.hotkey = FakeHotkey()

    def tearDown(self):
        self.controller.shutdown()

    def _liveness(self):
        self.liveness_calls += 1
        return self.alive

    def _controller(self, timings=IDLE, liveness=True):
        self.controller = AfkController(
            self.hw, hotkey=self.hotkey,
            liveness=self._liveness if liveness else None,
            timings=timings, rng_factory=lambda: random.Random(5),
            notify=self.messages.append,
        )
        return self.controller

    def test_start_is_idempotent(self):
        ctl = self._controller()
        ctl.start()
        first = ctl.sequencer
        ctl.start()
        self.assertIs(ctl.sequencer, first)
        self.assertTrue(first.is_alive())
        self.assertTrue(wait_until(lambda: "AFK Mining Enabled." in self.messages))
        self.assertEqual(self.messages.count("AFK Mining Enabled."), 1)

    def test_stop_when_inactive_is_silent(self):
        ctl = self._controller()
        ctl.stop()
        self.assertFalse(ctl.active)
        self.assertEqual(self.messages, [])

    def test_hotkey_toggles_on_and_off(self):
        ctl = self._controller()
        self.hotkey.press()
        ctl.on_tick(now=0)
        self.assertTrue(ctl.active)
        seq = ctl.sequencer
        self.assertTrue(seq.is_alive())

        self.hotkey.press()
        ctl.on_tick(now=10)
        self.assertFalse(ctl.active)
        self.assertIsNone(ctl.sequencer)
        self.assertIn("AFK Mining Disabled.", self.messages)
        seq.join(1.0)
        self.assertFalse(seq.is_alive())

    def test_every_pending_press_is_drained(self):
        ctl = self._controller()
        self.hotkey.press(times=3)
        ctl.on_tick(now=0)
        self.assertEqual(self.hotkey.pending, 0)
        self.assertTrue(ctl.active)

    def test_liveness_check_is_throttled(self):
        ctl = self._controller()
        ctl.on_tick(now=1000)
        ctl.on_tick(now=1200)
        ctl.on_tick(now=1499)
        self.assertEqual(self.liveness_calls, 1)
        ctl.on_tick(now=1500)
        self.assertEqual(self.liveness_calls, 2)

    def test_death_forces_stop(self):
        ctl = self._controller()
        ctl.start()
        seq = ctl.sequencer
        self.alive = False
        ctl.on_tick(now=1000)
        self.assertFalse(ctl.active)
        self.assertIsNone(ctl.sequencer)
        self.assertIn("Player had died, AFK Mining Disabled.", self.messages)
        self.assertIn("AFK Mining Disabled.", self.messages)
        seq.join(1.0)
        self.assertFalse(seq.is_alive())

    def test_missing_player_skips_check(self):
        ctl = self._controller()
        ctl.start()
        self.alive = None
        ctl.on_tick(now=1000)
        self.assertTrue(ctl.active)
        self.assertFalse(ctl.player_present)

    def test_dead_player_while_inactive_is_ignored(self):
        ctl = self._controller()
        self.alive = False
        ctl.on_tick(now=1000)
        self.assertFalse(ctl.active)
        self.assertEqual(self.messages, [])
        self.assertTrue(ctl.player_present)

    def test_no_liveness_means_player_present(self):
        ctl = self._controller(liveness=False)
        ctl.on_tick(now=1000)
        self.assertTrue(ctl.player_present)

    def test_perturber_starts_after_countdown_and_stop_releases_keys(self):
        ctl = self._controller(timings=FAST)
        ctl.start()
        self.assertTrue(wait_until(lambda: ctl.perturber is not None and ctl.perturber.is_alive()))
        self.assertTrue(wait_until(lambda: ctl.sequencer.cycles >= 1))
        seq, anti = ctl.sequencer, ctl.perturber
        ctl.stop()
        seq.join(1.0)
        anti.join(1.0)
        self.assertFalse(seq.is_alive())
        self.assertFalse(anti.is_alive())
        self.assertFalse(self.hw.is_pressed(Key.ATTACK))
        self.assertEqual(self.hw.pressed_keys(), set())

    def test_restart_after_stop_uses_fresh_gate(self):
        ctl = self._controller()
        ctl.start()
        first_gate = ctl.gate
        first_gate.pause()
        ctl.stop()
        ctl.start()
        self.assertIsNot(ctl.gate, first_gate)
        self.assertFalse(ctl.gate.is_paused())

    def test_device_error_turns_controller_off(self):
        class FailingBack(HardwareController):
            def _send(self, key, pressed):
                if key is Key.BACK and pressed:
                    raise OSError("device unplugged")

        self.hw = FailingBack(auto_connect=False)
        ctl = self._controller(timings=FAST)
        with self.assertLogs("backend.controller", level="ERROR"):
            ctl.start()
            seq = ctl.sequencer
            self.assertTrue(wait_until(lambda: not ctl.active))
        seq.join(1.0)
        self.assertFalse(seq.is_alive())
        self.assertIsNone(ctl.sequencer)
        self.assertFalse(ctl.is_running())
        self.assertIn("AFK Mining Disabled.", self.messages)

    def test_callbacks_from_previous_run_are_ignored(self):
        ctl = self._controller()
        ctl.start()
        old_ready, old_exit = ctl.sequencer.on_ready, ctl.sequencer.on_exit
        ctl.stop()
        ctl.start()

        old_ready()
        self.assertIsNone(ctl.perturber)
        old_exit()
        self.assertTrue(ctl.active)
        self.assertTrue(ctl.is_running())

        ctl.sequencer.on_ready()
        self.assertTrue(ctl.perturber.is_alive())
        self.assertIs(ctl.perturber.gate, ctl.gate)


if __name__ == "__main__":
    unittest.main()
