# logic/check_alive.py
import logging

from backend.logic_plugin import LogicPluginBase

logger = logging.getLogger(__name__)


class PlayerAliveCheck(LogicPluginBase):
    def check(self, engine):
        """
        True  -> 血條探測點是血色 (活著)
        False -> 血條還在但已經空了 (死亡)
        None  -> 看不到血條 (沒有載入角色 / 截圖失敗)
        """
        s = engine.settings
        x, y = s.hp_probe
        tolerance = s.hp_tolerance

        try:
            if engine.vision.check_pixel_color(x, y, s.hp_color, tolerance=tolerance):
                return True
            if engine.vision.check_pixel_color(x, y, s.hp_empty_color, tolerance=tolerance):
                logger.info("[邏輯] ⚠️ 血條已空，判定角色死亡")
                return False
        except Exception as e:  # noqa: BLE001  mss 在不同平台丟的錯誤類型不一
            logger.debug("[邏輯] 截圖失敗: %s", e)
            return None

        return None
