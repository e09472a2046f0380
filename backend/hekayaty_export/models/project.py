"""
作品模型 - 编辑器交给导出流水线的三种作品形态

对应编辑器草稿结构（tc_draft_story / tc_draft_comic / tc_draft_photo），
字段名沿用前端的 camelCase 别名，编辑器额外字段（id/wordCount/lastModified 等）忽略。
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Iterator, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


class ProjectType(str, Enum):
    """作品类型"""
    STORY = "story"
    COMIC = "comic"
    PHOTO = "photo"


_MODEL_CONFIG = {"populate_by_name": True, "extra": "ignore"}


# ============================================================================
# 小说
# ============================================================================

class StoryPage(BaseModel):
    """小说单页（HTML片段）"""
    content: str = ""

    model_config = _MODEL_CONFIG


class Chapter(BaseModel):
    """章节"""
    title: str = ""
    pages: list[StoryPage] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


class StoryProject(BaseModel):
    """小说作品"""
    title: str
    chapters: list[Chapter] = Field(default_factory=list)

    model_config = _MODEL_CONFIG

    def iter_pages(self) -> Iterator[StoryPage]:
        """按章节顺序遍历所有页"""
        for chapter in self.chapters:
            yield from chapter.pages


# ============================================================================
# 漫画
# ============================================================================

class VisualElement(BaseModel):
    """漫画页图层元素（800x1100 逻辑坐标）"""
    type: str
    image_url: str | None = Field(None, alias="imageUrl")
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    # 文字气泡等其它元素原样保留
    model_config = {"populate_by_name": True, "extra": "allow"}

    @property
    def is_image(self) -> bool:
        return self.type == "image"


class ComicPage(BaseModel):
    """漫画单页"""
    id: str = ""
    title: str = ""
    elements: list[VisualElement] = Field(default_factory=list)
    background_color: str | None = Field(None, alias="backgroundColor")

    model_config = _MODEL_CONFIG

    def image_elements(self) -> list[VisualElement]:
        """按数组顺序返回图片元素（即绘制顺序）"""
        return [el for el in self.elements if el.is_image]


class ComicProject(BaseModel):
    """漫画作品"""
    title: str
    pages: list[ComicPage] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


# ============================================================================
# 图片故事
# ============================================================================

class PhotoPage(BaseModel):
    """图片故事单页"""
    photo_url: str = Field("", alias="photoUrl")
    caption: str = ""

    model_config = _MODEL_CONFIG


class PhotoProject(BaseModel):
    """图片故事作品"""
    title: str
    pages: list[PhotoPage] = Field(default_factory=list)

    model_config = _MODEL_CONFIG


# ============================================================================
# 带标签的输入
# ============================================================================

class StoryInput(BaseModel):
    type: Literal["story"] = "story"
    project: StoryProject


class ComicInput(BaseModel):
    type: Literal["comic"] = "comic"
    project: ComicProject


class PhotoInput(BaseModel):
    type: Literal["photo"] = "photo"
    project: PhotoProject


ProjectInput = Annotated[
    Union[StoryInput, ComicInput, PhotoInput],
    Field(discriminator="type"),
]

_input_adapter: TypeAdapter[Any] = TypeAdapter(ProjectInput)


def parse_project_input(data: dict[str, Any]) -> StoryInput | ComicInput | PhotoInput:
    """
    解析 {type, project} 结构

    Raises:
        pydantic.ValidationError: type 未知或结构不匹配
    """
    return _input_adapter.validate_python(data)
