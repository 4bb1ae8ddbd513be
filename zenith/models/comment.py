from sqlalchemy import Column, Enum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from zenith.db.base_class import Base
from zenith.models.enums import CommentStatus


class Comment(Base):
    __tablename__ = "comments"

    content = Column(Text, nullable=False)
    status = Column(Enum(CommentStatus, name="comment_status"), nullable=False, default=CommentStatus.PENDING, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    author = relationship("User", foreign_keys=[author_id], lazy="joined")
    post = relationship("Post", foreign_keys=[post_id])
