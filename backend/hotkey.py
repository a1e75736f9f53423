# backend/hotkey.py
import logging
import threading

logger = logging.getLogger(__name__)


def parse_key_spec(spec):
    """'k' -> ('char', 'k')；'f8' / 'F8' -> ('special', 'f8')"""
    spec = str(spec).strip().lower()
    if not spec:
        raise ValueError("empty hotkey")
    if len(spec) == 1:
        return ('char', spec)
    return ('special', spec)


class ToggleHotkey:
    """
    全域切換熱鍵 (邊緣觸發)
    監聽執行緒每按一次累加一次，畫面 tick 時用 was_pressed() 逐次取出
    """

    def __init__(self, spec="k"):
        self.spec = spec
        self.kind, self.name = parse_key_spec(spec)
        self._lock = threading.Lock()
        self._presses = 0
        self.listener = None

    def matches(self, key):
        if self.kind == 'char':
            char = getattr(key, 'char', None)
            return char is not None and char.lower() == self.name
        return getattr(key, 'name', None) == self.name

    def on_press(self, key):
        if self.matches(key):
            with self._lock:
                self._presses += 1

    def was_pressed(self):
        with self._lock:
            if self._presses > 0:
                self._presses -= 1
                return True
            return False

    def start(self):
        # pynput 在匯入時就會連接輸入後端，等到真的要監聽才載入
        from pynput import keyboard

        self.stop()
        self.listener = keyboard.Listener(on_press=self.on_press)
        self.listener.start()
        logger.info("[系統] ⌨️ 切換熱鍵監聽已啟動 (按 %s 開關掛機)", self.spec.upper())

    def stop(self):
        if self.listener:
            self.listener.stop()
            self.listener = None
