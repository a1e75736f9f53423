# backend/sleeper.py
import time
import threading

from backend.pause_gate import Interrupted
from backend.settings import POLL_INTERVAL_MS


class CancellableSleep:
    """
    把長時間的等待切成 <=100ms 的小段
    - 閘門進入暫停時立刻返回 (不等剩下的時間)
    - 收到停止請求時拋出 Interrupted
    """

    def __init__(self, gate, interrupt=None, poll_ms=POLL_INTERVAL_MS, clock=time.monotonic):
        self.gate = gate
        self.interrupt = interrupt if interrupt is not None else threading.Event()
        self.poll_ms = poll_ms
        self.clock = clock

    def check(self):
        if self.interrupt.is_set():
            raise Interrupted()

    def sleep(self, duration_ms):
        """回傳 True = 睡滿，False = 因暫停提早結束 (呼叫端要重新檢查閘門)"""
        start = self.clock()
        while True:
            self.check()
            elapsed_ms = (self.clock() - start) * 1000
            if elapsed_ms >= duration_ms:
                return True
            if self.gate.is_paused():
                return False
            interval = min(self.poll_ms, duration_ms - elapsed_ms)
            # Event.wait 讓停止請求可以直接打斷這一小段
            if self.interrupt.wait(interval / 1000.0):
                raise Interrupted()

    def settle(self, duration_ms):
        """固定延遲：不理會暫停，只理會停止請求"""
        if duration_ms <= 0:
            self.check()
            return
        if self.interrupt.wait(duration_ms / 1000.0):
            raise Interrupted()
