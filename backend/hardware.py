# backend/hardware.py
import enum
import time
import logging
import threading

import serial
import serial.tools.list_ports

logger = logging.getLogger(__name__)


class Key(enum.Enum):
    """遊戲中用到的邏輯按鍵"""
    ATTACK = "attack"
    FORWARD = "forward"
    BACK = "back"


# Arduino HID 指令代碼 (D,<code> 按下 / U,<code> 放開)
# 1 = 滑鼠左鍵，其餘為 Keyboard.h 的 ASCII 碼
ARDUINO_CODES = {
    Key.ATTACK: 1,
    Key.FORWARD: ord('w'),
    Key.BACK: ord('s'),
}

# 軟體模擬 (pyautogui) 用的按鍵名稱
SOFTWARE_KEYS = {
    Key.FORWARD: 'w',
    Key.BACK: 's',
}


class HardwareController:
    """
    邏輯按鍵的輸入層
    - Arduino 模式: 透過序列埠送指令給 HID 板
    - 軟體模式: 用 pyautogui 直接注入
    - Mock 模式: 只寫日誌 (連線失敗或測試時)
    """

    def __init__(self, port="", auto_connect=True, software_input=False):
        self.lock = threading.Lock()
        self.mock_mode = not software_input
        self.software_input = software_input
        self.arduino = None
        self.port = port
        self._pyautogui = None
        self._pressed = {key: False for key in Key}

        # 每次按鍵狀態變化時通知 UI / 測試
        self.input_callback = None

        if auto_connect and port:
            self.connect(port)

    @staticmethod
    def get_available_ports():
        ports = serial.tools.list_ports.comports()
        result = []
        for p in ports:
            result.append(f"{p.device} - {p.description}")
        return result

    @property
    def mode(self):
        if self.arduino is not None and self.arduino.is_open: return "arduino"
        if self.mock_mode: return "mock"
        return "software"

    def set_input_callback(self, callback):
        """設定按鍵狀態變化的 callback(key, pressed)"""
        self.input_callback = callback

    def connect(self, port):
        self.port = port
        self.mock_mode = False
        if self.arduino and self.arduino.is_open:
            self.arduino.close()
        try:
            # 加入 write_timeout 防止卡死
            self.arduino = serial.Serial(port, 115200, timeout=0.01, write_timeout=1.0)
            time.sleep(2)
            logger.info("[系統] ✅ Arduino 連接成功 (Port: %s)", port)
            return True
        except (serial.SerialException, ValueError) as e:
            self.arduino = None
            self.mock_mode = not self.software_input
            fallback = "軟體注入模式" if self.software_input else "虛擬 Mock 模式"
            logger.warning("[系統] ⚠️ 連接失敗 (%s)，切換至【%s】", e, fallback)
            return False

    def close(self):
        self.release_all()
        if self.arduino and self.arduino.is_open:
            self.arduino.close()

    def _arduino_write(self, command):
        """安全寫入指令"""
        if not self.arduino or not self.arduino.is_open: return
        try:
            self.arduino.write(command)
        except serial.SerialTimeoutException:
            logger.warning("[硬體] ⚠️ 寫入超時 (緩衝區滿)，略過指令")
        except serial.SerialException as e:
            logger.error("[硬體] ❌ 寫入錯誤: %s", e)

    def _software(self):
        # pyautogui 在匯入時就會連接顯示器，延後到第一次使用
        if self._pyautogui is None:
            import pyautogui
            pyautogui.FAILSAFE = False
            self._pyautogui = pyautogui
        return self._pyautogui

    def _send(self, key, pressed):
        mode = self.mode
        if mode == "arduino":
            op = "D" if pressed else "U"
            self._arduino_write(f"{op},{ARDUINO_CODES[key]}\n".encode())
        elif mode == "software":
            gui = self._software()
            if key is Key.ATTACK:
                if pressed: gui.mouseDown(button='left')
                else: gui.mouseUp(button='left')
            else:
                if pressed: gui.keyDown(SOFTWARE_KEYS[key])
                else: gui.keyUp(SOFTWARE_KEYS[key])
        else:
            logger.debug("[Mock] %s %s", "⬇️ 按下" if pressed else "⬆️ 放開", key.value)

    def set_pressed(self, key, pressed, force=False):
        """force=True 時即使狀態相同也重送一次 (停止時的保險)"""
        with self.lock:
            if self._pressed[key] == pressed and not force: return
            self._pressed[key] = pressed
            self._send(key, pressed)
        if self.input_callback:
            self.input_callback(key, pressed)

    def press(self, key):
        self.set_pressed(key, True)

    def release(self, key):
        self.set_pressed(key, False)

    def is_pressed(self, key):
        with self.lock:
            return self._pressed[key]

    def pressed_keys(self):
        with self.lock:
            return {key for key, down in self._pressed.items() if down}

    def release_all(self):
        for key in Key:
            self.set_pressed(key, False)
