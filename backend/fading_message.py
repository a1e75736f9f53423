# backend/fading_message.py
import time
import logging
import threading

from backend.settings import MESSAGE_DURATION_MS, FADE_OUT_MS, HUD_BOTTOM_OFFSET

logger = logging.getLogger(__name__)


def now_ms():
    return time.time() * 1000.0


class FadingMessageDisplay:
    """
    HUD 上的暫時訊息 (同一時間只有一則)
    背景執行緒寫入，畫面每幀讀取並依剩餘時間計算透明度
    """

    def __init__(self, clock=now_ms, fade_ms=FADE_OUT_MS, bottom_offset=HUD_BOTTOM_OFFSET):
        self.clock = clock
        self.fade_ms = fade_ms
        self.bottom_offset = bottom_offset
        self._lock = threading.Lock()
        self._text = ""
        self._expires_at = 0.0

    @property
    def text(self):
        with self._lock:
            return self._text

    @property
    def expires_at(self):
        with self._lock:
            return self._expires_at

    def show(self, text, duration_ms=MESSAGE_DURATION_MS):
        with self._lock:
            self._text = str(text)
            self._expires_at = self.clock() + duration_ms

    def clear(self):
        with self._lock:
            self._text = ""
            self._expires_at = 0.0

    def snapshot(self, now=None):
        """回傳 (文字, alpha)；沒有要畫的東西時回傳 None"""
        if now is None: now = self.clock()
        with self._lock:
            text, expires_at = self._text, self._expires_at
        if not text or now >= expires_at:
            return None

        remaining = expires_at - now
        alpha = 255
        if remaining < self.fade_ms:
            # 剩最後一段時間時，alpha 依比例遞減
            alpha = int(255 * (remaining / self.fade_ms))
        return text, alpha

    def alpha_at(self, now=None):
        snap = self.snapshot(now)
        return snap[1] if snap else None

    def render(self, surface, now=None):
        """
        畫在 surface 上，surface 需提供:
          size() -> (w, h), text_width(text), draw_text(text, x, y, argb)
        回傳是否有畫出東西
        """
        snap = self.snapshot(now)
        if snap is None: return False
        text, alpha = snap

        screen_w, screen_h = surface.size()
        text_w = surface.text_width(text)
        # 水平置中，快捷列正上方
        x = (screen_w - text_w) // 2
        y = screen_h - self.bottom_offset
        # alpha 合併白色
        color = (alpha << 24) | 0xFFFFFF
        surface.draw_text(text, x, y, color)
        return True


# 全程式共用的 HUD 訊息
hud = FadingMessageDisplay()


def debug(message, duration_ms=MESSAGE_DURATION_MS, display=None):
    """顯示 HUD 訊息 5 秒，同時寫入日誌"""
    logger.info("[HUD] %s", message)
    (display or hud).show(message, duration_ms)
