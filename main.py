# main.py
import sys
import logging

# 1. 先單獨引入 QApplication
from PySide6.QtWidgets import QApplication

LOG_FILE = "afk_miner.log"


def setup_logging(level=logging.INFO):
    formatter = logging.Formatter('%(asctime)s:%(levelname)s:%(name)s: %(message)s')
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    file_handler = logging.FileHandler(LOG_FILE, encoding='utf-8', mode='a')
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)


def run():
    # 2. ★ 先建立 Qt 應用程式，再建立任何視窗元件 (QWidget 需要已存在的 QApplication)
    app = QApplication(sys.argv)
    setup_logging()

    # 3. 建立好 App 後才引入主視窗 (pyautogui / pynput 在使用時才載入)
    from frontend.main_window import MainWindow

    # 4. 顯示視窗
    window = MainWindow()
    window.show()
    logging.getLogger(__name__).info("[系統] ✅ AFK Miner Ready!")

    # 5. 執行
    return app.exec()


if __name__ == "__main__":
    sys.exit(run())
