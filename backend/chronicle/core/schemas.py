from __future__ import annotations

from datetime import datetime
from typing import Any, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


PostStatus = Literal["draft", "published"]
CategoryType = Literal["event_type", "era", "region"]
ManuscriptStatus = Literal["draft", "in_progress", "completed"]
CommentType = Literal["comment", "annotation", "revision", "highlight"]
CommentStatus = Literal["open", "resolved", "archived"]
GoalType = Literal["daily", "weekly", "monthly", "total", "session"]
ResearchType = Literal["web", "book", "article", "interview", "document", "image"]


# 对外 JSON 使用 camelCase，Python 内部保持 snake_case
class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OkResponse(ApiModel):
    success: bool = True


class PostCreate(ApiModel):
    title: str
    content: str
    excerpt: str
    date_of_event: str
    category_ids: List[int] = Field(default_factory=list)
    tag_ids: List[int] = Field(default_factory=list)
    status: PostStatus = "draft"


class PostUpdate(ApiModel):
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    date_of_event: Optional[str] = None
    status: Optional[PostStatus] = None
    category_ids: Optional[List[int]] = None
    tag_ids: Optional[List[int]] = None


class PostOut(ApiModel):
    id: int
    title: str
    content: str
    excerpt: str
    date_of_event: str
    year_of_event: int
    slug: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CategoryCreate(ApiModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    type: CategoryType
    color: Optional[str] = None


class CategoryOut(ApiModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    type: str
    color: Optional[str] = None


class TagCreate(ApiModel):
    name: str
    slug: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None


class TagOut(ApiModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    color: Optional[str] = None


class ImageCreate(ApiModel):
    post_id: int
    filename: str
    original_name: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None
    is_hero: bool = False


class ImageUpdate(ApiModel):
    alt: Optional[str] = None
    caption: Optional[str] = None
    is_hero: Optional[bool] = None
    sort_order: Optional[int] = None


class ImageOut(ApiModel):
    id: int
    post_id: int
    filename: str
    original_name: str
    alt: Optional[str] = None
    caption: Optional[str] = None
    size: int
    mime_type: str
    width: Optional[int] = None
    height: Optional[int] = None
    is_hero: bool = False
    sort_order: int = 0
    url: Optional[str] = None
    created_at: Optional[datetime] = None


class PostDetail(PostOut):
    categories: List[CategoryOut] = Field(default_factory=list)
    tags: List[TagOut] = Field(default_factory=list)
    images: List[ImageOut] = Field(default_factory=list)


class ManuscriptCreate(ApiModel):
    title: str = ""
    description: Optional[str] = None
    target_word_count: Optional[int] = None


class ManuscriptOut(ApiModel):
    id: int
    title: str
    description: Optional[str] = None
    status: str
    word_count: Optional[int] = 0
    target_word_count: Optional[int] = None
    settings: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SectionCreate(ApiModel):
    post_id: Optional[int] = None
    title: str
    content: Optional[str] = None
    synopsis: Optional[str] = None
    type: str = "document"
    status: Optional[str] = None
    custom_icon: Optional[str] = None
    label: Optional[str] = None
    sort_order: int = 0
    target_word_count: Optional[int] = None
    include_in_compile: bool = True
    notes: Optional[str] = None
    keywords: Optional[str] = None
    date_of_event: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    corkboard_position: Optional[dict[str, Any]] = None


class SectionQuickCreate(ApiModel):
    manuscript_id: Optional[int] = None
    parent_id: Optional[int] = None
    title: Optional[str] = None
    type: Optional[str] = None


class SectionUpdate(ApiModel):
    parent_id: Optional[int] = None
    post_id: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None
    synopsis: Optional[str] = None
    type: Optional[str] = None
    sort_order: Optional[int] = None
    word_count: Optional[int] = None
    target_word_count: Optional[int] = None
    include_in_compile: Optional[bool] = None
    notes: Optional[str] = None
    status: Optional[str] = None
    label: Optional[str] = None
    keywords: Optional[str] = None
    custom_icon: Optional[str] = None
    date_of_event: Optional[str] = None


class SectionOut(ApiModel):
    id: int
    manuscript_id: int
    parent_id: Optional[int] = None
    post_id: Optional[int] = None
    title: str
    content: Optional[str] = None
    synopsis: Optional[str] = None
    type: str
    sort_order: int = 0
    word_count: int = 0
    target_word_count: Optional[int] = None
    include_in_compile: bool = True
    notes: Optional[str] = None
    status: Optional[str] = None
    label: Optional[str] = None
    keywords: Optional[str] = None
    custom_icon: Optional[str] = None
    date_of_event: Optional[str] = None
    metadata: Optional[str] = None
    corkboard_position: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CommentCreate(ApiModel):
    manuscript_id: int
    content: str = ""
    position: int = 0
    length: int = 0
    type: CommentType = "comment"


class CommentUpdate(ApiModel):
    content: Optional[str] = None
    position: Optional[int] = None
    length: Optional[int] = None
    type: Optional[CommentType] = None
    status: Optional[CommentStatus] = None
    color: Optional[str] = None
    author_note: Optional[str] = None


class CommentOut(ApiModel):
    id: int
    section_id: int
    manuscript_id: int
    content: str
    position: int
    length: int = 0
    type: str
    status: str
    color: Optional[str] = None
    author_note: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SnapshotCreate(ApiModel):
    manuscript_id: int
    title: str = ""
    content: Optional[str] = None
    word_count: int = 0
    description: Optional[str] = None
    is_automatic: bool = True


class SnapshotOut(ApiModel):
    id: int
    section_id: int
    manuscript_id: int
    title: str
    content: str
    word_count: int
    version: int
    description: Optional[str] = None
    is_automatic: bool = True
    created_at: Optional[datetime] = None


class CollectionCreate(ApiModel):
    name: str = ""
    description: Optional[str] = None
    color: Optional[str] = None
    is_smart_collection: bool = False
    smart_filters: Optional[str] = None


class CollectionOut(ApiModel):
    id: int
    manuscript_id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    is_smart_collection: bool = False
    smart_filters: Optional[str] = None
    created_at: Optional[datetime] = None
    section_ids: List[int] = Field(default_factory=list)
    section_count: int = 0


class CollectionItemCreate(ApiModel):
    section_id: Optional[int] = None


class WritingSessionCreate(ApiModel):
    section_id: Optional[int] = None
    words_written: int
    characters_written: int
    time_spent: int
    session_goal: Optional[int] = None
    started_at: datetime
    ended_at: datetime


class WritingSessionOut(ApiModel):
    id: int
    manuscript_id: int
    section_id: Optional[int] = None
    words_written: int
    characters_written: int
    time_spent: int
    session_goal: Optional[int] = None
    goal_achieved: bool = False
    started_at: datetime
    ended_at: datetime


class WritingStats(ApiModel):
    words_written: int = 0
    characters_written: int = 0
    time_spent: int = 0
    sessions_count: int = 0


class WritingGoalCreate(ApiModel):
    section_id: Optional[int] = None
    type: Optional[GoalType] = None
    target_words: Optional[int] = None
    target_characters: Optional[int] = None
    target_time: Optional[int] = None
    deadline: Optional[str] = None


class WritingGoalOut(ApiModel):
    id: int
    manuscript_id: int
    section_id: Optional[int] = None
    type: str
    target_words: Optional[int] = None
    target_characters: Optional[int] = None
    target_time: Optional[int] = None
    deadline: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


class ResearchCreate(ApiModel):
    title: str = ""
    content: str = ""
    source: Optional[str] = None
    type: ResearchType = "web"
    tags: Optional[str] = None


class ResearchUpdate(ApiModel):
    title: Optional[str] = None
    content: Optional[str] = None
    source: Optional[str] = None
    type: Optional[ResearchType] = None
    tags: Optional[str] = None
    is_pinned: Optional[bool] = None


class ResearchOut(ApiModel):
    id: int
    manuscript_id: int
    title: str
    content: str
    source: Optional[str] = None
    type: str
    tags: Optional[str] = None
    is_pinned: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# 单次编译的参数对象，不落库
class BookCompilationOptions(ApiModel):
    title: str = ""
    subtitle: Optional[str] = None
    author: str = ""
    include_status: Literal["all", "published", "draft"] = "published"
    sort_by: Literal["date", "chronological", "category"] = "chronological"
    include_images: bool = False
    include_categories: List[int] = Field(default_factory=list)
    include_tags: List[int] = Field(default_factory=list)
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    # 未识别的取值在渲染时回退到默认值
    template: str = "standard"
    page_size: str = "a4"
    font_size: str = "medium"
    include_table_of_contents: bool = True
    include_cover_page: bool = True
    include_index: bool = False
    manuscript_id: Optional[int] = None


class CompiledOptionsEcho(ApiModel):
    template: str
    page_size: str
    font_size: str
    include_images: bool


class CompiledBookMetadata(ApiModel):
    title: str
    subtitle: Optional[str] = None
    author: str
    generated_at: str
    total_posts: int
    filename: str
    file_size: int
    chapters: int
    options: CompiledOptionsEcho


class CompileResponse(ApiModel):
    success: bool = True
    download_url: str
    metadata: CompiledBookMetadata


class CompileStatusResponse(ApiModel):
    stage: str
    progress: int
    message: str


class SaveBookRequest(ApiModel):
    manuscript_id: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None
    word_count: Optional[int] = None


class SaveBookResponse(ApiModel):
    success: bool = True
    message: str
    manuscript: ManuscriptOut
    saved_at: str


class SavedBookResponse(ApiModel):
    success: bool = True
    manuscript: ManuscriptOut
    saved_book_content: Optional[str] = None
    last_compiled: Optional[str] = None
    has_saved_content: bool = False
