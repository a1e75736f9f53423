# frontend/styles.py

DARK_THEME = """
QMainWindow { background-color: #1e1e1e; }
QWidget { color: #ffffff; font-family: 'Segoe UI', sans-serif; font-size: 14px; }
QPushButton { background-color: #3e3e42; border: 1px solid #555; border-radius: 5px; padding: 8px; }
QPushButton:hover { background-color: #505050; }
QPushButton:pressed { background-color: #0d6efd; }
QPushButton#RunBtn { background-color: #198754; font-weight: bold; }
QPushButton#StopBtn { background-color: #dc3545; font-weight: bold; }
QPushButton#ConnectBtn { background-color: #0d6efd; font-weight: bold; }
QLabel#StatusOn { color: #00ff00; font-weight: bold; }
QLabel#StatusOff { color: #aaaaaa; font-weight: bold; }
QTextEdit { background-color: #000000; color: #00ff00; font-family: Consolas; border: 1px solid #444; }
QFrame#Panel { background-color: #2d2d30; border-radius: 8px; padding: 10px; }
QLineEdit { background-color: #1e1e1e; color: #ffffff; border: 1px solid #555; border-radius: 4px; padding: 5px; }
QComboBox { background-color: #1e1e1e; color: #ffffff; border: 1px solid #555; padding: 5px; border-radius: 4px; }
QComboBox QAbstractItemView { background-color: #2d2d30; color: #ffffff; selection-background-color: #0d6efd; selection-color: #ffffff; border: 1px solid #555; }
QCheckBox { color: #ffffff; }
"""
