# frontend/main_window.py
import logging

import mss

# PySide6 元件
from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                               QPushButton, QLabel, QFrame, QTextEdit,
                               QCheckBox, QComboBox, QLineEdit)
from PySide6.QtCore import QTimer

# 後端與工具引用
from backend.controller import AfkController
from backend.hardware import HardwareController
from backend.hotkey import ToggleHotkey
from backend.logic_plugin import EngineBridge
from backend.settings import load_settings, save_settings
from backend.vision import VisionEye
from logic.check_alive import PlayerAliveCheck

from frontend.overlay import HudOverlay
from frontend.styles import DARK_THEME
from frontend.workers import QtLogHandler

logger = logging.getLogger(__name__)

# 主執行緒 tick 間隔 (ms)
TICK_INTERVAL_MS = 50


class MainWindow(QMainWindow):
    def __init__(self, settings=None):
        super().__init__()
        self.setWindowTitle("AFK Miner")
        self.resize(520, 640)
        self.setStyleSheet(DARK_THEME)

        self.settings = settings or load_settings()

        self.hw = HardwareController(auto_connect=False, software_input=self.settings.software_input)
        self.vision = VisionEye(monitor_index=self.settings.monitor_index)
        self.bridge = EngineBridge(self.hw, self.vision, self.settings)
        self.alive_check = PlayerAliveCheck()
        self.hotkey = ToggleHotkey(self.settings.toggle_key)

        self.controller = AfkController(self.hw, hotkey=self.hotkey, liveness=self.probe_liveness)

        self.overlay = HudOverlay(presence=lambda: self.controller.player_present)
        self.overlay.show()

        # 日誌轉到面板
        self.log_handler = QtLogHandler()
        logging.getLogger().addHandler(self.log_handler)

        self.init_dashboard()
        self.log_handler.log_signal.connect(self.log_text_main.append)

        if self.settings.serial_port:
            self.connect_hardware(self.settings.serial_port)

        self.hotkey.start()

        # 每幀 tick：熱鍵 + 存活檢查
        self.tick_timer = QTimer(self)
        self.tick_timer.timeout.connect(self.on_tick)
        self.tick_timer.start(TICK_INTERVAL_MS)

    def init_dashboard(self):
        central = QWidget(); self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        panel = QFrame(); panel.setObjectName("Panel"); panel_layout = QVBoxLayout(panel)

        panel_layout.addWidget(QLabel("🔌 硬體連線設定"))
        hw_layout = QHBoxLayout()
        self.combo_ports = QComboBox(); self.btn_refresh_ports = QPushButton("🔄 掃描"); self.btn_refresh_ports.clicked.connect(self.refresh_ports)
        self.btn_connect_hw = QPushButton("🔗 連線"); self.btn_connect_hw.setObjectName("ConnectBtn"); self.btn_connect_hw.clicked.connect(lambda: self.connect_hardware())
        hw_layout.addWidget(self.combo_ports, 3); hw_layout.addWidget(self.btn_refresh_ports, 1); hw_layout.addWidget(self.btn_connect_hw, 1)
        panel_layout.addLayout(hw_layout)

        self.chk_software = QCheckBox("⌨️ 無硬體時使用軟體注入 (pyautogui)")
        self.chk_software.setChecked(self.settings.software_input)
        self.chk_software.stateChanged.connect(self.on_software_changed)
        panel_layout.addWidget(self.chk_software)

        panel_layout.addSpacing(10); panel_layout.addWidget(QLabel("🖥️ 螢幕選擇 (血條偵測)"))
        self.combo_monitors = QComboBox()
        with mss.mss() as sct:
            for i, m in enumerate(sct.monitors):
                if i == 0: continue
                self.combo_monitors.addItem(f"螢幕 {i}: {m['width']}x{m['height']}", i)
        idx = self.combo_monitors.findData(self.settings.monitor_index)
        if idx >= 0: self.combo_monitors.setCurrentIndex(idx)
        self.combo_monitors.currentIndexChanged.connect(self.on_monitor_changed)
        panel_layout.addWidget(self.combo_monitors)

        self.chk_liveness = QCheckBox("🩸 角色死亡時自動停止"); self.chk_liveness.setChecked(True); panel_layout.addWidget(self.chk_liveness)
        self.chk_overlay = QCheckBox("👁️ 顯示 HUD 訊息"); self.chk_overlay.setChecked(True); self.chk_overlay.stateChanged.connect(lambda: self.overlay.setVisible(self.chk_overlay.isChecked())); panel_layout.addWidget(self.chk_overlay)

        panel_layout.addSpacing(10); panel_layout.addWidget(QLabel("🎛️ 切換熱鍵"))
        key_layout = QHBoxLayout()
        self.edit_hotkey = QLineEdit(self.settings.toggle_key)
        btn_apply_key = QPushButton("套用"); btn_apply_key.clicked.connect(self.apply_hotkey)
        key_layout.addWidget(self.edit_hotkey, 3); key_layout.addWidget(btn_apply_key, 1)
        panel_layout.addLayout(key_layout)

        self.lbl_status = QLabel()
        self.btn_run = QPushButton("▶ 開始掛機"); self.btn_run.setObjectName("RunBtn"); self.btn_run.clicked.connect(self.start_afk)
        self.btn_stop = QPushButton("⏹ 停止"); self.btn_stop.setObjectName("StopBtn"); self.btn_stop.clicked.connect(self.stop_afk)

        self.log_text_main = QTextEdit(); self.log_text_main.setReadOnly(True)
        panel_layout.addWidget(self.lbl_status); panel_layout.addWidget(self.btn_run); panel_layout.addWidget(self.btn_stop)
        panel_layout.addWidget(QLabel("運行日誌:")); panel_layout.addWidget(self.log_text_main)
        self.update_status()

        layout.addWidget(panel)
        self.refresh_ports()

    def probe_liveness(self):
        if not self.chk_liveness.isChecked(): return True
        return self.alive_check.check(self.bridge)

    def on_tick(self):
        self.controller.on_tick()
        self.update_status()

    def update_status(self):
        running = self.controller.active
        self.lbl_status.setText(f"狀態: {'🟢 掛機中' if running else '⚪ 待機'}  |  輸入: {self.hw.mode}")
        self.lbl_status.setObjectName("StatusOn" if running else "StatusOff")
        self.lbl_status.style().unpolish(self.lbl_status); self.lbl_status.style().polish(self.lbl_status)
        self.btn_run.setEnabled(not running); self.btn_stop.setEnabled(running)

    def start_afk(self):
        if not self.controller.active: self.controller.toggle()
        self.update_status()

    def stop_afk(self):
        if self.controller.active: self.controller.toggle()
        self.update_status()

    def apply_hotkey(self):
        spec = self.edit_hotkey.text().strip()
        try:
            new_hotkey = ToggleHotkey(spec)
        except ValueError:
            self.log_text_main.append("❌ 熱鍵不可為空"); return
        self.hotkey.stop()
        self.hotkey = new_hotkey
        self.controller.hotkey = new_hotkey
        self.hotkey.start()
        self.settings.toggle_key = spec
        save_settings(self.settings)

    def refresh_ports(self):
        self.combo_ports.clear(); ports = HardwareController.get_available_ports()
        if ports: self.combo_ports.addItems(ports)

    def connect_hardware(self, port_name=None):
        if port_name is None: port_name = self.combo_ports.currentText().split(" - ")[0]
        if not port_name: return
        if self.hw.connect(port_name):
            self.btn_connect_hw.setText("✅ 已連線"); self.btn_connect_hw.setStyleSheet("background-color: #198754;")
            self.settings.serial_port = port_name
            save_settings(self.settings)
        else:
            self.btn_connect_hw.setText("❌ 失敗"); self.btn_connect_hw.setStyleSheet("background-color: #dc3545;")
        self.update_status()

    def on_software_changed(self):
        self.hw.software_input = self.chk_software.isChecked()
        if self.hw.mode != "arduino": self.hw.mock_mode = not self.hw.software_input
        self.settings.software_input = self.hw.software_input
        save_settings(self.settings)
        self.update_status()

    def on_monitor_changed(self, index):
        self.vision.set_monitor(self.combo_monitors.currentData())
        self.settings.monitor_index = self.combo_monitors.currentData()
        save_settings(self.settings)

    def closeEvent(self, event):
        self.tick_timer.stop()
        self.controller.shutdown()
        self.hotkey.stop()
        self.hw.close()
        self.overlay.close()
        logging.getLogger().removeHandler(self.log_handler)
        super().closeEvent(event)
