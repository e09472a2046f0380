"""
配置层 - 加载导出流水线运行期配置

职责：
- 加载 config/export_runtime.yaml（运行期参数）
- 提供环境变量覆盖机制（HEKAYATY_EXPORT_ 前缀）
- 提供类型安全的配置访问接口
"""

from .runtime_config import (
    BundleConfig,
    CanvasConfig,
    FetchConfig,
    LoggingConfig,
    PDFLayoutConfig,
    RuntimeConfig,
    get_config,
    reload_config,
)

__all__ = [
    "RuntimeConfig",
    "FetchConfig",
    "PDFLayoutConfig",
    "CanvasConfig",
    "BundleConfig",
    "LoggingConfig",
    "get_config",
    "reload_config",
]
