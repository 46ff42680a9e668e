from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PostStatus = Literal["published", "unlisted"]


class PostAttributes(BaseModel):
    """Typed front matter of a post file. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", strict=True)

    title: str
    createdAt: str
    slug: str
    tags: List[str] = Field(default_factory=list)
    status: PostStatus = "published"
    description: Optional[str] = None


class PostRecord(PostAttributes):
    """One stored post, keyed by its path in the content repository."""

    model_config = ConfigDict(extra="ignore")

    path: str
    content: str
    lastModifiedAt: Optional[str] = None


class PostSummary(BaseModel):
    slug: str
    title: str
    description: Optional[str] = None
    createdAt: str
    lastModifiedAt: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    readingTime: Optional[str] = None


class PostDetail(PostSummary):
    content: str
    html: str
