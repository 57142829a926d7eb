import copy
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "camera": {
        "width": 640,
        "height": 480,
        "fps": 30,
        "timeout_ms": 1000,   # 单次等待帧的超时（毫秒）
    },
    "stream": {
        "max_frames": 1000,   # 采集循环次数（含超时）
        "with_color": True,   # False: 仅输出点坐标
        "preview": False,     # 显示 OpenCV 彩色/深度预览窗口
    },
    "viewer": {
        "title": "point cloud",
        "width": 800,
        "height": 600,
        "point_size": 1.5,
        "background": [0.0, 0.0, 0.0],
    },
    "logging": {
        "level": "INFO",
    },
}


class ConfigManager:
    """配置管理器: 默认配置 + 可选 JSON 文件覆盖"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        defaults = copy.deepcopy(DEFAULT_CONFIG)
        if self.config_path is None:
            return defaults

        if not os.path.exists(self.config_path):
            logger.warning("Config file %s not found, using defaults", self.config_path)
            return defaults

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Failed to load config file %s: %s", self.config_path, e)
            logger.info("Using default config")
            return defaults

        logger.info("Loaded config file %s", self.config_path)
        return self._merge_config(defaults, loaded)

    def _merge_config(self, default: Dict[str, Any], loaded: Dict[str, Any]) -> Dict[str, Any]:
        """递归合并配置，以加载的配置为优先"""
        merged = default.copy()
        for key, value in loaded.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._merge_config(merged[key], value)
            else:
                merged[key] = value
        return merged

    def update_config(self, section: str, updates: Dict[str, Any]) -> None:
        """更新配置的某个部分; 值为 None 的项被忽略"""
        updates = {k: v for k, v in updates.items() if v is not None}
        self.config.setdefault(section, {}).update(updates)
        logger.debug("Config section %s updated: %s", section, updates)

    def get_camera_config(self) -> Dict[str, Any]:
        return self.config["camera"]

    def get_stream_config(self) -> Dict[str, Any]:
        return self.config["stream"]

    def get_viewer_config(self) -> Dict[str, Any]:
        return self.config["viewer"]

    def get_logging_config(self) -> Dict[str, Any]:
        return self.config["logging"]
