from chronicle.api.routes.posts import router as posts_router
from chronicle.api.routes.categories import router as categories_router
from chronicle.api.routes.tags import router as tags_router
from chronicle.api.routes.images import router as images_router
from chronicle.api.routes.manuscripts import router as manuscripts_router
from chronicle.api.routes.sections import router as sections_router
from chronicle.api.routes.comments import router as comments_router
from chronicle.api.routes.snapshots import router as snapshots_router
from chronicle.api.routes.research import router as research_router
from chronicle.api.routes.collections import router as collections_router
from chronicle.api.routes.book import router as book_router
from chronicle.api.routes.save_book import router as save_book_router
from chronicle.api.routes.book_layouts import router as book_layouts_router

# 对外导出路由
__all__ = [
    "posts_router",
    "categories_router",
    "tags_router",
    "images_router",
    "manuscripts_router",
    "sections_router",
    "comments_router",
    "snapshots_router",
    "research_router",
    "collections_router",
    "book_router",
    "save_book_router",
    "book_layouts_router",
]
