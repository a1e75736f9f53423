# backend/controller.py
import logging
import threading

from backend.anti_idle import AntiIdlePerturber
from backend.fading_message import debug, now_ms
from backend.hardware import Key
from backend.pause_gate import PauseGate
from backend.sequencer import ActionSequencer
from backend.settings import DEFAULT_TIMINGS, LIVENESS_CHECK_INTERVAL_MS

logger = logging.getLogger(__name__)


class AfkController:
    """
    掛機開關:
    - 每次 tick 取出熱鍵事件，切換主流程 + 防掛機兩條執行緒
    - 每 500ms 檢查一次角色存活，死亡就強制關閉
    """

    def __init__(self, hw, hotkey=None, liveness=None, timings=DEFAULT_TIMINGS,
                 rng_factory=None, notify=debug, clock=now_ms):
        self.hw = hw
        self.hotkey = hotkey
        # liveness() -> True / False / None (沒有角色)
        self.liveness = liveness
        self.timings = timings
        self.rng_factory = rng_factory
        self.notify = notify
        self.clock = clock

        self.active = False
        # 沒有存活檢查時一律視為有角色
        self.player_present = liveness is None
        self.gate = None
        self.interrupt = None
        self.sequencer = None
        self.perturber = None
        self._lock = threading.RLock()
        self._last_check = 0.0

    def _rng(self):
        return self.rng_factory() if self.rng_factory else None

    # --- 每幀 ---
    def on_tick(self, now=None):
        if now is None: now = self.clock()

        if self.hotkey is not None:
            while self.hotkey.was_pressed():
                self.toggle()

        if now - self._last_check >= LIVENESS_CHECK_INTERVAL_MS:
            self._last_check = now
            self.check_liveness()

    def check_liveness(self):
        if self.liveness is None: return
        alive = self.liveness()
        self.player_present = alive is not None
        if alive is None:
            return
        if not alive and self.active:
            self.notify("Player had died, AFK Mining Disabled.")
            logger.warning("[系統] 💀 角色死亡，強制停止掛機")
            self.active = False
            self.stop()

    # --- 開關 ---
    def toggle(self):
        with self._lock:
            self.active = not self.active
            if self.active:
                self.start()
            else:
                self.stop()

    def is_running(self):
        return self.sequencer is not None and self.sequencer.is_alive()

    def start(self):
        with self._lock:
            if self.is_running():
                return
            self.active = True
            self.gate = PauseGate()
            self.interrupt = interrupt = threading.Event()
            self.perturber = None
            # 回呼綁定本次的 interrupt，舊執行緒的回呼不會影響新的一輪
            self.sequencer = ActionSequencer(
                self.hw, self.gate, interrupt, timings=self.timings, rng=self._rng(),
                on_ready=lambda: self._start_perturber(interrupt),
                on_exit=lambda: self._worker_exited(interrupt),
                notify=self.notify,
            )
            self.sequencer.start()
            logger.info("[系統] 🚀 掛機已啟動")

    def _is_current(self, interrupt):
        return interrupt is self.interrupt and not interrupt.is_set()

    def _start_perturber(self, interrupt):
        # 在主流程執行緒上被呼叫 (倒數結束後)
        with self._lock:
            if not self._is_current(interrupt):
                return
            if self.perturber is not None and self.perturber.is_alive():
                return
            self.perturber = AntiIdlePerturber(
                self.gate, interrupt, timings=self.timings, rng=self._rng(),
                on_exit=lambda: self._worker_exited(interrupt), notify=self.notify,
            )
            self.perturber.start()

    def _worker_exited(self, interrupt):
        # 沒有被 stop() 就結束 = 執行緒出錯，整輪關掉讓 active 與實際狀態一致
        with self._lock:
            if not self._is_current(interrupt):
                return
            logger.error("[系統] ❌ 背景執行緒意外結束，強制停止掛機")
            try:
                self.stop()
            except Exception:
                logger.exception("[系統] ❌ 停止時放開按鍵失敗")

    def stop(self):
        with self._lock:
            if self.sequencer is None and self.perturber is None:
                return
            self.notify("AFK Mining Disabled.")
            try:
                self.hw.set_pressed(Key.ATTACK, False, force=True)
            finally:
                # 硬體出錯也要把執行緒停掉
                if self.interrupt is not None:
                    self.interrupt.set()
                if self.gate is not None:
                    self.gate.wake_all()

                self.sequencer = None
                self.perturber = None
                self.active = False
            logger.info("[系統] ⏹ 掛機已停止")

    def shutdown(self, timeout=1.0):
        """關閉視窗時呼叫：停止並等待執行緒收尾"""
        sequencer, perturber = self.sequencer, self.perturber
        self.stop()
        for t in (sequencer, perturber):
            if t is not None:
                t.join(timeout)
        self.hw.release_all()
