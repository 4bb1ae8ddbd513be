from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from zenith.db.base_class import Base
from zenith.models.enums import PostStatus

# Link rows are removed explicitly by the services before a post or tag goes away
post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id"), primary_key=True),
)


class Post(Base):
    __tablename__ = "posts"

    title = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, index=True, nullable=False)
    content = Column(Text, nullable=False)
    status = Column(Enum(PostStatus, name="post_status"), nullable=False, default=PostStatus.DRAFT, index=True)
    reading_time = Column(Integer, nullable=False, default=0)  # minutes
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)

    # Relationships (one direction only, no cascades)
    author = relationship("User", foreign_keys=[author_id], lazy="joined")
    category = relationship("Category", foreign_keys=[category_id], lazy="joined")
    tags = relationship("Tag", secondary=post_tags, order_by="Tag.name")
