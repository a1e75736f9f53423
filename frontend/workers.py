# frontend/workers.py
import logging

from PySide6.QtCore import QObject, Signal


# --- 日誌轉送到 UI ---
class LogEmitter(QObject):
    log_signal = Signal(str)


class QtLogHandler(logging.Handler):
    """
    背景執行緒寫的日誌透過 Signal 丟回主執行緒
    (跨執行緒的 Signal 會自動排入 UI 事件佇列)
    """

    def __init__(self, level=logging.INFO):
        super().__init__(level)
        self.emitter = LogEmitter()
        self.log_signal = self.emitter.log_signal
        self.setFormatter(logging.Formatter("%(asctime)s %(message)s", "%H:%M:%S"))

    def emit(self, record):
        try:
            self.log_signal.emit(self.format(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)
