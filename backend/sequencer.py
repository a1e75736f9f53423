# backend/sequencer.py
import random
import logging
import threading

from backend.fading_message import debug
from backend.hardware import Key
from backend.pause_gate import Interrupted
from backend.settings import DEFAULT_TIMINGS
from backend.sleeper import CancellableSleep

logger = logging.getLogger(__name__)


class ActionSequencer(threading.Thread):
    """
    掛機主流程:
      開場訊息 -> 1 秒 -> 7 秒倒數 -> 無限循環五個步驟
    每一步前都先經過 PauseGate，暫停中會先放開所有按鍵再等待
    """

    def __init__(self, hw, gate, interrupt=None, timings=DEFAULT_TIMINGS, rng=None,
                 on_ready=None, on_exit=None, notify=debug):
        super().__init__(name="afk-sequencer", daemon=True)
        self.hw = hw
        self.gate = gate
        self.interrupt = interrupt if interrupt is not None else threading.Event()
        self.timings = timings
        self.rng = rng or random.Random()
        self.on_ready = on_ready
        # 執行緒結束時回呼 (正常停止或意外錯誤都會呼叫)
        self.on_exit = on_exit
        self.notify = notify
        self.sleeper = CancellableSleep(gate, self.interrupt, poll_ms=timings.poll_interval_ms)
        self.cycles = 0

    def stop(self):
        self.interrupt.set()
        self.gate.wake_all()

    def _release_movement(self):
        self.hw.release(Key.ATTACK)
        self.hw.release(Key.FORWARD)
        self.hw.release(Key.BACK)

    def wait_if_paused(self, then=None):
        return self.gate.await_resume(self.interrupt, on_block=self._release_movement, then=then)

    def _press_when_open(self, key, message):
        """訊息與按下在閘門鎖內完成，暫停期間不會有按下事件"""
        def act():
            self.notify(message)
            self.hw.press(key)
        self.wait_if_paused(then=act)

    def run(self):
        try:
            self.notify("AFK Mining Enabled.")
            self.sleeper.settle(self.timings.startup_delay_ms)

            # 開始前倒數
            for remaining in range(self.timings.countdown_steps, 0, -1):
                self.sleeper.check()
                self.notify(f"Main sequence starts in {remaining} seconds")
                self.sleeper.settle(self.timings.countdown_tick_ms)

            self.sleeper.check()
            if self.on_ready: self.on_ready()

            while True:
                self.wait_if_paused()
                self.run_sequence()
                self.cycles += 1
        except Interrupted:
            logger.info("[主流程] 🛑 已停止 (完成 %d 輪)", self.cycles)
        except Exception:
            logger.exception("[主流程] ❌ 執行錯誤，掛機中止")
        finally:
            try:
                self._release_movement()
            except Exception:
                logger.exception("[主流程] ❌ 放開按鍵失敗")
            if self.on_exit: self.on_exit()

    def _hold(self, key, label):
        low, high = self.timings.key_hold_range
        duration = low + self.rng.random() * (high - low)
        self._press_when_open(key, f"Pressing '{label}' for {duration:.2f} seconds")
        self.sleeper.sleep(duration * 1000)
        self.hw.release(key)
        self.sleeper.settle(self.timings.settle_ms)

    def run_sequence(self):
        t = self.timings

        # 1. 按住左鍵開始挖
        self._press_when_open(Key.ATTACK, "Holding left click")
        self.sleeper.settle(t.settle_ms)

        # 2. 按住 s 後退一段隨機時間
        self._hold(Key.BACK, 's')

        # 3. 按住 w 前進一段隨機時間
        self._hold(Key.FORWARD, 'w')

        # 4. 兩輪之間的等待 (暫停時提早結束)
        self.wait_if_paused()
        low, high = t.sequence_wait_range
        timeout = low + self.rng.random() * (high - low)
        self.notify(f"Waiting {timeout:.2f} seconds before repeating the sequence")
        self.sleeper.sleep(timeout * 1000)

        # 5. 放開左鍵
        self.wait_if_paused()
        self.notify("Releasing left click")
        self.hw.release(Key.ATTACK)
        self.sleeper.settle(t.settle_ms)
