from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class PageGeometry:
    key: str
    # CSS 尺寸（@page size）
    css_width: str
    css_height: str
    # 物理尺寸（pt）
    width_pt: float
    height_pt: float
    margin_top: str = "1in"
    margin_bottom: str = "1in"
    margin_side: str = "0.75in"

    @property
    def css_size(self) -> str:
        return f"{self.css_width} {self.css_height}"

    @property
    def css_margin(self) -> str:
        return (
            f"{self.margin_top} {self.margin_side} "
            f"{self.margin_bottom} {self.margin_side}"
        )


# 页面尺寸表：key 为编译参数 pageSize 的取值
PAGE_GEOMETRIES: Dict[str, PageGeometry] = {
    "a4": PageGeometry("a4", "210mm", "297mm", 595.28, 841.89),
    "us-letter": PageGeometry("us-letter", "8.5in", "11in", 612.0, 792.0),
    "a5": PageGeometry("a5", "148mm", "210mm", 419.53, 595.28),
    "6x9": PageGeometry("6x9", "6in", "9in", 432.0, 648.0),
}
DEFAULT_PAGE_SIZE = "a4"

# 正文字号
FONT_SIZES: Dict[str, str] = {
    "small": "9pt",
    "medium": "10.5pt",
    "large": "12pt",
}
DEFAULT_FONT_SIZE = "medium"

# 模板：key -> 展示名（样式覆盖见 book_renderer）
TEMPLATES: Dict[str, str] = {
    "standard": "Standard",
    "academic": "Academic",
    "coffee-table": "Coffee Table",
    "minimal": "Minimal",
}
DEFAULT_TEMPLATE = "standard"


def normalize_page_size(value: str | None) -> str:
    candidate = (value or "").strip().lower()
    if candidate in PAGE_GEOMETRIES:
        return candidate
    return DEFAULT_PAGE_SIZE


def get_page_geometry(page_size: str | None) -> PageGeometry:
    return PAGE_GEOMETRIES[normalize_page_size(page_size)]


def get_font_size(font_size: str | None) -> str:
    return FONT_SIZES.get((font_size or "").strip().lower(), FONT_SIZES[DEFAULT_FONT_SIZE])


def normalize_template(value: str | None) -> str:
    candidate = (value or "").strip().lower()
    if candidate in TEMPLATES:
        return candidate
    return DEFAULT_TEMPLATE


def list_layouts() -> dict[str, Tuple[dict[str, str], ...]]:
    return {
        "templates": tuple({"key": key, "label": label} for key, label in TEMPLATES.items()),
        "page_sizes": tuple(
            {"key": key, "width": geo.css_width, "height": geo.css_height}
            for key, geo in PAGE_GEOMETRIES.items()
        ),
        "font_sizes": tuple({"key": key, "size": size} for key, size in FONT_SIZES.items()),
    }
