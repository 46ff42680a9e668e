from sqlalchemy import Column, Index, String, Text

from app.db.postgres.base import Base


class BlogPost(Base):
    __tablename__ = "BlogPosts"

    path = Column("Path", String(512), primary_key=True)
    slug = Column("Slug", String(512), nullable=False)
    title = Column("Title", Text, nullable=False)
    content = Column("Content", Text, nullable=False)
    created_at = Column("CreatedAt", String(64), nullable=False)
    last_modified_at = Column("LastModifiedAt", String(64), nullable=True)
    status = Column("Status", String(32), nullable=False)
    tags = Column("Tags", Text, nullable=False, default="[]")  # JSON array
    description = Column("Description", Text, nullable=True)

    __table_args__ = (
        Index("ix_BlogPosts_Slug", "Slug"),
        Index("ix_BlogPosts_Status_CreatedAt", "Status", "CreatedAt"),
    )
