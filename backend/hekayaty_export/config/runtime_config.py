"""
运行期配置 - 读取 config/export_runtime.yaml

职责：
- 加载抓取超时/PDF版式/画布尺寸/打包输出等运行参数
- 提供环境变量覆盖机制
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

DEFAULT_CONFIG_PATH = Path("config/export_runtime.yaml")


class FetchConfig(BaseModel):
    """资源抓取配置"""

    timeout_sec: float = 30.0
    follow_redirects: bool = True
    user_agent: str = "hekayaty-export/0.1"


class PDFLayoutConfig(BaseModel):
    """PDF版式配置（单位：pt）"""

    margin: float = 40.0
    line_height: float = 16.0
    font_name: str = "Times-Roman"
    font_size: float = 12.0
    title_font_size: float = 18.0
    font_path: str | None = None  # TTF字体（阿拉伯文等非拉丁文字）
    text_extraction: Literal["parser", "regex"] = "parser"


class CanvasConfig(BaseModel):
    """漫画画布配置"""

    width: int = 800
    height: int = 1100
    scale: int = 3
    default_background: str = "#ffffff"


class BundleConfig(BaseModel):
    """打包输出配置"""

    output_dir: Path = Path("exports")
    fallback_name: str = "project"
    write_manifest: bool = False
    compress: bool = True


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    fetch: FetchConfig = Field(default_factory=FetchConfig)
    pdf: PDFLayoutConfig = Field(default_factory=PDFLayoutConfig)
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    bundle: BundleConfig = Field(default_factory=BundleConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "HEKAYATY_EXPORT_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        runtime_opts = data.get("runtime_options", {})

        config = cls(
            fetch=FetchConfig(**cls._extract(runtime_opts, "fetch")),
            pdf=PDFLayoutConfig(**cls._extract(runtime_opts, "pdf")),
            canvas=CanvasConfig(**cls._extract(runtime_opts, "canvas")),
            bundle=BundleConfig(**cls._extract(runtime_opts, "bundle")),
            logging=LoggingConfig(**cls._extract(runtime_opts, "logging")),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置"""
        section = data.get(key) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """字体路径相对于配置文件所在目录解析"""
        if self.pdf.font_path:
            font_path = Path(self.pdf.font_path)
            if not font_path.is_absolute():
                self.pdf.font_path = str((base_dir / font_path).resolve())


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
