import logging

import cv2
import numpy as np
import mss

logger = logging.getLogger(__name__)


class VisionEye:
    def __init__(self, monitor_index=1):
        """
        初始化視覺模組 (只負責截圖與取色)
        """
        self.monitor_index = monitor_index
        self.monitor_rect = None

        with mss.mss() as sct:
            self.update_monitor_info(sct)

    def update_monitor_info(self, sct_instance=None):
        should_close = False
        if sct_instance is None:
            sct_instance = mss.mss()
            should_close = True

        if self.monitor_index < len(sct_instance.monitors):
            self.monitor_rect = sct_instance.monitors[self.monitor_index]
        else:
            logger.warning("[視覺] ⚠️ 螢幕編號 %s 超出範圍，重設為 1", self.monitor_index)
            self.monitor_index = 1
            self.monitor_rect = sct_instance.monitors[1]

        if should_close:
            sct_instance.close()

    def set_monitor(self, index):
        self.monitor_index = index
        with mss.mss() as sct:
            self.update_monitor_info(sct)
        logger.info("[視覺] 👁️ 已切換至螢幕 %s", index)

    def capture_screen(self, region=None):
        with mss.mss() as sct:
            monitor = self.monitor_rect
            if region:
                x, y, w, h = region
                monitor_region = {"top": y, "left": x, "width": w, "height": h}
                sct_img = sct.grab(monitor_region)
            else:
                sct_img = sct.grab(monitor)

            img = np.array(sct_img)
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
            return img

    def pixel_at(self, x, y):
        """回傳 (r, g, b)，座標為螢幕絕對座標"""
        img = self.capture_screen(region=(x, y, 1, 1))
        b, g, r = img[0][0]
        return int(r), int(g), int(b)

    def check_pixel_color(self, x, y, target_rgb, tolerance=20):
        r, g, b = self.pixel_at(x, y)
        diff = np.abs(np.array([r, g, b], dtype=int) - np.array(target_rgb, dtype=int))
        return bool(np.all(diff <= tolerance))
