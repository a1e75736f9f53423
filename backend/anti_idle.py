# backend/anti_idle.py
import random
import logging
import threading

from backend.fading_message import debug
from backend.pause_gate import Interrupted
from backend.settings import DEFAULT_TIMINGS
from backend.sleeper import CancellableSleep

logger = logging.getLogger(__name__)


class AntiIdlePerturber(threading.Thread):
    """隨機暫停 / 恢復主流程，模擬玩家偶爾發呆"""

    def __init__(self, gate, interrupt=None, timings=DEFAULT_TIMINGS, rng=None, on_exit=None, notify=debug):
        super().__init__(name="afk-anti-idle", daemon=True)
        self.gate = gate
        self.interrupt = interrupt if interrupt is not None else threading.Event()
        self.timings = timings
        self.rng = rng or random.Random()
        self.notify = notify
        self.on_exit = on_exit
        self.sleeper = CancellableSleep(gate, self.interrupt, poll_ms=timings.poll_interval_ms)
        self.pauses = 0

    def stop(self):
        self.interrupt.set()

    def _draw(self, bounds):
        low, high = bounds
        return low + self.rng.random() * (high - low)

    def run(self):
        t = self.timings
        try:
            while True:
                wait_before = self._draw(t.anti_idle_wait_range)
                self.notify(f"[AntiAFK] Waiting {wait_before:.2f} seconds before pausing the algorithm")
                self.sleeper.settle(wait_before * 1000)

                self.gate.pause()
                self.pauses += 1
                try:
                    pause_for = self._draw(t.anti_idle_pause_range)
                    self.notify(f"[AntiAFK] Pausing the algorithm for {pause_for:.2f} seconds to avoid AFK")
                    self.sleeper.settle(pause_for * 1000)
                finally:
                    # 被停止或出錯時也要恢復，避免閘門卡在暫停狀態
                    self.gate.resume()

                self.sleeper.settle(t.anti_idle_stabilize_ms)
        except Interrupted:
            logger.info("[防掛機] 🛑 已停止 (共暫停 %d 次)", self.pauses)
        except Exception:
            logger.exception("[防掛機] ❌ 執行錯誤，掛機中止")
        finally:
            if self.on_exit: self.on_exit()
