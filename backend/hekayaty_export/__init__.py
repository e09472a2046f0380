"""
Hekayaty 作品导出 - 小说/漫画/图片故事 → 自包含ZIP（HTML + PDF + 资源）

模块结构：
- config/     运行期配置加载
- models/     数据模型定义（作品/资源/导出任务）
- assets/     资源命名、抓取与解析
- render/     HTML/PDF渲染、漫画页栅格化
- pipeline/   导出编排与打包
- cli         命令行入口
"""

__version__ = "0.1.0"

from .pipeline import BundleAssembler, export_project

__all__ = ["BundleAssembler", "export_project", "__version__"]
