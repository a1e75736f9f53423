# backend/logic_plugin.py

class LogicPluginBase:
    """
    邏輯判斷插件的基底類別
    所有邏輯插件都必須繼承它，並實作 check 方法
    """

    def check(self, engine):
        """
        執行判斷邏輯
        :param engine: 包含 .hw (硬體) 和 .vision (視覺) 的橋接器
        :return: True / False，無法判斷時回傳 None
        """
        return None


class EngineBridge:
    def __init__(self, hardware, vision, settings):
        self.hw = hardware; self.vision = vision; self.settings = settings
