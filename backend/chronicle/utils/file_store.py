from __future__ import annotations

import os
import re
from pathlib import Path
from urllib.parse import unquote
from uuid import uuid4

from chronicle.core.config import settings


_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


# 确保书籍输出目录存在并返回路径
def ensure_books_dir() -> str:
    os.makedirs(settings.books_dir, exist_ok=True)
    return settings.books_dir


# 生成编译产物文件名：标题净化 + 随机后缀
def new_book_filename(title: str) -> str:
    safe_title = _UNSAFE_FILENAME_CHARS.sub("_", title)
    return f"{safe_title}_{uuid4().hex}.pdf"


# 图片对外访问地址
def image_url(filename: str) -> str:
    return f"{settings.uploads_url_prefix.rstrip('/')}/{filename}"


# 图片 URL -> uploads_dir 下的 file:// 地址；其他 URL 原样返回
# 根路径 URL 经 PDF 渲染器的 base_url 解析后形如 file:///uploads/x.jpg
def local_upload_url(url: str) -> str:
    prefix = settings.uploads_url_prefix.rstrip("/") + "/"
    for candidate in (prefix, "file://" + prefix):
        if url.startswith(candidate):
            relative = unquote(url[len(candidate):])
            return Path(os.path.abspath(settings.uploads_dir), relative).as_uri()
    return url
