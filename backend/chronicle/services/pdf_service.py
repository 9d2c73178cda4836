from __future__ import annotations

import logging
import os

from chronicle.core.config import settings
from chronicle.utils.file_store import ensure_books_dir, local_upload_url, new_book_filename


logger = logging.getLogger(__name__)


# 资源加载：图片 URL 改指向 uploads_dir，其余交给默认加载器
def _fetch_resource(url, *args, **kwargs):
    from weasyprint import default_url_fetcher

    return default_url_fetcher(local_upload_url(url), *args, **kwargs)


# HTML -> PDF 字节流（页面尺寸与边距由 HTML 中的 @page 规则决定）
def html_to_pdf(html: str) -> bytes:
    # weasyprint 导入时加载 pango 等系统库，放到调用时
    from weasyprint import HTML

    return HTML(
        string=html,
        base_url=os.path.abspath(settings.public_dir),
        url_fetcher=_fetch_resource,
    ).write_pdf()


# 渲染并写入公开目录，返回 (文件名, 字节数)
def write_book_pdf(html: str, title: str) -> tuple[str, int]:
    pdf = html_to_pdf(html)
    output_dir = ensure_books_dir()
    filename = new_book_filename(title)
    path = os.path.join(output_dir, filename)
    with open(path, "wb") as handle:
        handle.write(pdf)
    logger.info("PDF written: %s (%d bytes)", path, len(pdf))
    return filename, len(pdf)
