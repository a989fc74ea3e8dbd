"""ORM models for posts and their file attachments."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base


class Post(Base):
    """
    Post authored by a single account.

    Attachments live on disk under <UPLOAD_DIR>/posts/<id>/ and are listed in
    upload order.
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    published = Column(Boolean, nullable=False, default=False)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    author = relationship("User", back_populates="posts")
    attachments = relationship(
        "PostAttachment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PostAttachment.id",
    )

    @property
    def owner_id(self) -> int:
        return self.author_id


class PostAttachment(Base):
    """
    Metadata for one uploaded file.

    original_name is display-only; stored_name is unique per post and path is
    relative to UPLOAD_DIR.
    """

    __tablename__ = "post_attachments"
    __table_args__ = (
        UniqueConstraint("post_id", "stored_name", name="uq_post_attachments_post_id_stored_name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    original_name = Column(String(255), nullable=False)
    stored_name = Column(String(255), nullable=False)
    path = Column(String(1024), nullable=False)
    mime_type = Column(String(255), nullable=False)
    size = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    post = relationship("Post", back_populates="attachments")
