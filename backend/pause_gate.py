# backend/pause_gate.py
import threading


class Interrupted(Exception):
    """停止請求：由阻塞點拋出，讓背景迴圈整個退出"""


class PauseGate:
    """
    主流程與防掛機執行緒之間唯一共用的暫停旗標
    所有讀寫都在同一把鎖底下，resume 時喚醒所有等待者
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._paused = False

    def pause(self):
        with self._cond:
            self._paused = True

    def resume(self):
        with self._cond:
            self._paused = False
            self._cond.notify_all()

    def is_paused(self):
        with self._cond:
            return self._paused

    def wake_all(self):
        """不改變旗標，只把等待中的執行緒叫起來重新檢查 (停止時用)"""
        with self._cond:
            self._cond.notify_all()

    def await_resume(self, cancel=None, on_block=None, then=None):
        """
        暫停中就阻塞到 resume 為止
        :param cancel: threading.Event，被設定時拋出 Interrupted
        :param on_block: 每次準備進入等待前呼叫 (例如放開按鍵)
        :param then: 確認未暫停後、仍持有鎖時執行，pause() 無法插進檢查與動作之間
        """
        with self._cond:
            while self._paused:
                if cancel is not None and cancel.is_set():
                    raise Interrupted()
                if on_block is not None:
                    on_block()
                self._cond.wait()
            if cancel is not None and cancel.is_set():
                raise Interrupted()
            if then is not None:
                return then()
