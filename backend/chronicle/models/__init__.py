from chronicle.models.post import Post
from chronicle.models.taxonomy import Category, Tag, PostCategory, PostTag
from chronicle.models.image import Image
from chronicle.models.manuscript import Manuscript
from chronicle.models.section import Section
from chronicle.models.comment import Comment
from chronicle.models.snapshot import Snapshot
from chronicle.models.collection import Collection, CollectionItem
from chronicle.models.writing import WritingSession, WritingGoal
from chronicle.models.research import ResearchReference

__all__ = [
    "Post",
    "Category",
    "Tag",
    "PostCategory",
    "PostTag",
    "Image",
    "Manuscript",
    "Section",
    "Comment",
    "Snapshot",
    "Collection",
    "CollectionItem",
    "WritingSession",
    "WritingGoal",
    "ResearchReference",
]
