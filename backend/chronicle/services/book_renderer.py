# 书籍 HTML 渲染：输出只取决于书籍结构与编译选项
# 页面尺寸、字号取自 core.book_layouts，模板只在基础样式上叠加 CSS

from __future__ import annotations

from jinja2 import Environment
from markupsafe import Markup

from chronicle.core.book_layouts import get_font_size, get_page_geometry, normalize_template
from chronicle.core.schemas import BookCompilationOptions
from chronicle.services.book_compiler import BookStructure
from chronicle.utils.text import format_event_date


BASE_CSS = """
@page {
  size: {{ page_size }};
  margin: {{ page_margin }};
}
* { box-sizing: border-box; }
body {
  font-family: 'Georgia', 'Times New Roman', serif;
  font-size: {{ font_size }};
  line-height: 1.6;
  color: #333;
  margin: 0;
  padding: 0;
}
.page-break { page-break-before: always; }
.cover-page {
  display: flex;
  flex-direction: column;
  justify-content: center;
  align-items: center;
  height: 100vh;
  text-align: center;
  page-break-after: always;
}
.cover-title { font-size: 2.5em; font-weight: bold; margin-bottom: 0.5em; color: #1a365d; }
.cover-subtitle { font-size: 1.3em; margin-bottom: 2em; color: #666; font-style: italic; }
.cover-author { font-size: 1.2em; margin-top: 2em; color: #333; }
.cover-count { margin-top: 3em; font-size: 0.9em; color: #666; }
.toc { page-break-after: always; }
.toc-title { font-size: 1.8em; font-weight: bold; margin-bottom: 1em; text-align: center; color: #1a365d; }
.toc-entry {
  display: flex;
  justify-content: space-between;
  margin-bottom: 0.5em;
  border-bottom: 1px dotted #ccc;
  padding-bottom: 0.2em;
}
.toc-entry.level-1 { font-weight: bold; margin-top: 1em; }
.chapter { page-break-before: always; }
.chapter-title {
  font-size: 1.5em;
  font-weight: bold;
  margin-bottom: 1.5em;
  color: #1a365d;
  border-bottom: 2px solid #1a365d;
  padding-bottom: 0.5em;
}
.post { margin-bottom: 2em; page-break-inside: avoid; }
.post-title { font-size: 1.2em; font-weight: bold; margin-bottom: 0.5em; color: #2d3748; }
.post-date { font-size: 0.9em; color: #666; margin-bottom: 0.5em; font-style: italic; }
.post-excerpt { margin-bottom: 1em; font-weight: 500; color: #4a5568; }
.post-content { text-align: justify; margin-bottom: 1em; }
.post-content p { margin-bottom: 0.8em; }
.post-images { margin: 1em 0; }
.post-image { max-width: 100%; height: auto; margin: 0.5em 0; page-break-inside: avoid; }
.image-caption { font-size: 0.9em; color: #666; font-style: italic; text-align: center; margin-top: 0.3em; }
.post-categories, .post-tags { margin-top: 1em; font-size: 0.9em; }
.category, .tag {
  display: inline-block;
  background-color: #e2e8f0;
  color: #2d3748;
  padding: 0.2em 0.5em;
  margin: 0.1em;
  border-radius: 0.3em;
  font-size: 0.8em;
}
.divider { border-top: 1px solid #e2e8f0; margin: 1.5em 0; }
"""

# 模板样式覆盖（standard 不覆盖）
TEMPLATE_CSS = {
    "standard": "",
    "academic": """
body { font-family: 'Times New Roman', serif; }
.chapter-title { text-transform: uppercase; letter-spacing: 1px; }
.post-title { text-decoration: underline; }
""",
    "coffee-table": """
.post-image { max-width: 80%; margin: 1em auto; display: block; }
.image-caption { font-size: 1em; margin-bottom: 1em; }
.post { page-break-before: always; }
""",
    "minimal": """
.chapter-title { border: none; font-size: 1.3em; }
.category, .tag { display: none; }
.post-date { display: none; }
""",
}

BOOK_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{{ meta.title }}</title>
<style>{{ styles }}</style>
</head>
<body>
{%- if include_cover %}
<div class="cover-page">
<h1 class="cover-title">{{ meta.title }}</h1>
{%- if meta.subtitle %}
<h2 class="cover-subtitle">{{ meta.subtitle }}</h2>
{%- endif %}
<div class="cover-author">by {{ meta.author }}</div>
<div class="cover-count">{{ meta.total_posts }} Historical Events</div>
</div>
{%- endif %}
{%- if include_toc %}
<div class="toc">
<h2 class="toc-title">Table of Contents</h2>
{%- for entry in toc %}
<div class="toc-entry level-{{ entry.level }}"><span>{{ entry.title }}</span><span>{{ entry.page }}</span></div>
{%- endfor %}
</div>
{%- endif %}
{%- for chapter in chapters %}
<div class="chapter">
<h2 class="chapter-title">{{ chapter.title }}</h2>
{%- for post in chapter.posts %}
<div class="post">
<h3 class="post-title">{{ post.title }}</h3>
<div class="post-date">{{ post.date_of_event | event_date }}</div>
<div class="post-excerpt">{{ post.excerpt }}</div>
<div class="post-content">{{ post.content | paragraphs }}</div>
{%- if include_images and post.images %}
<div class="post-images">
{%- for image in post.images %}
<figure><img class="post-image" src="{{ image.url }}" alt="{{ image.alt }}">
{%- if image.caption %}<figcaption class="image-caption">{{ image.caption }}</figcaption>{% endif %}</figure>
{%- endfor %}
</div>
{%- endif %}
<div class="post-categories"><strong>Categories:</strong>
{%- for category in post.categories %}<span class="category">{{ category.name }}</span>{% endfor %}</div>
<div class="post-tags"><strong>Tags:</strong>
{%- for tag in post.tags %}<span class="tag">{{ tag.name }}</span>{% endfor %}</div>
{%- if not loop.last %}
<div class="divider"></div>
{%- endif %}
</div>
{%- endfor %}
</div>
{%- endfor %}
</body>
</html>
"""


def format_paragraphs(content: str | None) -> Markup:
    # 空行分段为 <p>，段内换行转 <br>；正文来自富文本编辑器，不做转义
    if not content:
        return Markup("")
    normalized = content.replace("\r\n", "\n")
    paragraphs = [block.strip() for block in normalized.split("\n\n")]
    return Markup(
        "".join(
            "<p>" + block.replace("\n", "<br>") + "</p>" for block in paragraphs if block
        )
    )


_env = Environment(autoescape=True, keep_trailing_newline=True)
_env.filters["paragraphs"] = format_paragraphs
_env.filters["event_date"] = lambda value: format_event_date(value or "")
_book_template = _env.from_string(BOOK_TEMPLATE)
_base_css = _env.from_string(BASE_CSS)


def build_styles(options: BookCompilationOptions) -> str:
    geometry = get_page_geometry(options.page_size)
    base = _base_css.render(
        page_size=geometry.css_size,
        page_margin=geometry.css_margin,
        font_size=get_font_size(options.font_size),
    )
    return base + TEMPLATE_CSS[normalize_template(options.template)]


def render_book_html(structure: BookStructure, options: BookCompilationOptions) -> str:
    return _book_template.render(
        meta=structure.metadata,
        toc=structure.table_of_contents,
        chapters=structure.chapters,
        # 样式只含固定 CSS，不做转义
        styles=Markup(build_styles(options)),
        include_cover=options.include_cover_page,
        include_toc=options.include_table_of_contents,
        include_images=options.include_images,
    )

