# backend/settings.py
import os
import json
import logging
from dataclasses import dataclass, asdict, field, fields

logger = logging.getLogger(__name__)

# 設定檔路徑 (只存放硬體/視覺等外部連線參數，行為時間一律固定)
SETTINGS_FILE = "afk_settings.json"

# HUD 訊息預設顯示 5 秒
MESSAGE_DURATION_MS = 5000
# 最後 1 秒做淡出
FADE_OUT_MS = 1000
# 訊息的 Y 位置 = 螢幕高度 - 59 (快捷列上方)
HUD_BOTTOM_OFFSET = 59

# 生存檢查間隔
LIVENESS_CHECK_INTERVAL_MS = 500
# 可取消睡眠的輪詢粒度
POLL_INTERVAL_MS = 100


@dataclass(frozen=True)
class Timings:
    """掛機流程的所有時間常數 (秒 / 毫秒)"""
    startup_delay_ms: int = 1000
    countdown_steps: int = 7
    countdown_tick_ms: int = 1000
    settle_ms: int = 500
    key_hold_range: tuple = (0.3, 0.8)
    sequence_wait_range: tuple = (15.0, 23.0)
    # ★ 防掛機暫停前等待：原始註解寫 25~40 秒，實際算式是 25 + U*(40-30) -> 25~35 秒
    #   這裡保留實際行為 (25~35)，見 DESIGN.md
    anti_idle_wait_range: tuple = (25.0, 35.0)
    anti_idle_pause_range: tuple = (4.0, 7.0)
    anti_idle_stabilize_ms: int = 500
    poll_interval_ms: int = POLL_INTERVAL_MS


DEFAULT_TIMINGS = Timings()


@dataclass
class Settings:
    toggle_key: str = "k"
    serial_port: str = ""
    software_input: bool = True
    monitor_index: int = 1
    # 血條探測點 (螢幕絕對座標) 與顏色
    hp_probe: list = field(default_factory=lambda: [100, 30])
    hp_color: list = field(default_factory=lambda: [255, 0, 0])
    hp_empty_color: list = field(default_factory=lambda: [40, 40, 40])
    hp_tolerance: int = 30


def load_settings(path=SETTINGS_FILE):
    """讀取設定檔，不存在或格式錯誤時回傳預設值"""
    if not os.path.exists(path):
        return Settings()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("[設定] ⚠️ 設定檔讀取失敗 (%s)，使用預設值", e)
        return Settings()
    if not isinstance(raw, dict):
        logger.warning("[設定] ⚠️ 設定檔格式錯誤，使用預設值")
        return Settings()

    known = {f.name for f in fields(Settings)}
    unknown = sorted(k for k in raw if k not in known)
    if unknown:
        logger.warning("[設定] 忽略未知欄位: %s", ", ".join(unknown))
    return Settings(**{k: v for k, v in raw.items() if k in known})


def save_settings(settings, path=SETTINGS_FILE):
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(asdict(settings), f, indent=4, ensure_ascii=False)
    except OSError as e:
        logger.error("[設定] 設定儲存失敗: %s", e)
        return False
    return True
