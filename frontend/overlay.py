# frontend/overlay.py
from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QColor, QGuiApplication, QFont
from PySide6.QtCore import Qt, QTimer

from backend.fading_message import hud


class PainterSurface:
    """把 QPainter 包成 FadingMessageDisplay.render 需要的繪圖介面"""

    def __init__(self, painter, width, height):
        self.painter = painter
        self.width = width
        self.height = height

    def size(self):
        return self.width, self.height

    def text_width(self, text):
        return self.painter.fontMetrics().horizontalAdvance(text)

    def draw_text(self, text, x, y, argb):
        color = QColor((argb >> 16) & 0xFF, (argb >> 8) & 0xFF, argb & 0xFF, (argb >> 24) & 0xFF)
        self.painter.setPen(color)
        self.painter.drawText(int(x), int(y), text)


class HudOverlay(QWidget):
    def __init__(self, display=hud, presence=None):
        super().__init__()
        # 設定視窗屬性：無邊框、置頂、滑鼠穿透(重要!)、工具視窗
        self.setWindowFlags(
            Qt.WindowStaysOnTopHint |
            Qt.FramelessWindowHint |
            Qt.Tool |
            Qt.WindowTransparentForInput # ★ 關鍵：讓滑鼠可以點穿這個視窗
        )
        self.setAttribute(Qt.WA_TranslucentBackground) # 背景透明

        self.display = display
        # presence() -> 角色是否存在，沒有角色時不畫
        self.presence = presence

        # 覆蓋主螢幕
        screen = QGuiApplication.primaryScreen()
        if screen is not None:
            self.setGeometry(screen.geometry())

        self.hud_font = QFont("Segoe UI", 14)

        # 啟動刷新計時器 (30 FPS)
        self.timer = QTimer(self)
        self.timer.timeout.connect(self.update)
        self.timer.start(30)

    def paintEvent(self, event):
        if self.presence is not None and not self.presence():
            return
        painter = QPainter(self)
        painter.setRenderHint(QPainter.TextAntialiasing)
        painter.setFont(self.hud_font)
        surface = PainterSurface(painter, self.width(), self.height())
        self.display.render(surface)
        painter.end()
