"""Persistence for posts and their attachment records."""

from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from app.models import Post, PostAttachment


class PostRepository:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get(self, post_id: int) -> Post | None:
        return (
            self._db.query(Post)
            .options(joinedload(Post.author), selectinload(Post.attachments))
            .filter(Post.id == post_id)
            .first()
        )

    def find_many(
        self,
        owner_id: int | None,
        offset: int,
        limit: int,
        search: str | None = None,
    ) -> tuple[list[Post], int]:
        """Newest first; owner_id=None lists every author's posts."""
        query = self._db.query(Post)
        if owner_id is not None:
            query = query.filter(Post.author_id == owner_id)
        if search:
            query = query.filter(
                or_(
                    Post.title.icontains(search, autoescape=True),
                    Post.content.icontains(search, autoescape=True),
                )
            )
        total = query.count()
        posts = (
            query.options(joinedload(Post.author), selectinload(Post.attachments))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return posts, total

    def ids_for_author(self, author_id: int) -> list[int]:
        return [row.id for row in self._db.query(Post.id).filter(Post.author_id == author_id).all()]

    def create(self, post: Post) -> Post:
        self._db.add(post)
        self._db.commit()
        self._db.refresh(post)
        return post

    def update(self, post: Post, changes: dict[str, Any]) -> Post:
        for field, value in changes.items():
            setattr(post, field, value)
        self._db.commit()
        self._db.refresh(post)
        return post

    def delete(self, post: Post) -> None:
        """Delete the post row; attachment rows follow through ON DELETE CASCADE."""
        self._db.delete(post)
        self._db.commit()

    def stored_names(self, post_id: int) -> set[str]:
        rows = self._db.query(PostAttachment.stored_name).filter(PostAttachment.post_id == post_id)
        return {row.stored_name for row in rows}

    def create_attachments(self, attachments: list[PostAttachment]) -> list[PostAttachment]:
        """Persist one upload batch in a single transaction; returns records in upload order."""
        self._db.add_all(attachments)
        try:
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        for attachment in attachments:
            self._db.refresh(attachment)
        return attachments

    def get_attachment(self, attachment_id: int) -> PostAttachment | None:
        return (
            self._db.query(PostAttachment)
            .options(joinedload(PostAttachment.post))
            .filter(PostAttachment.id == attachment_id)
            .first()
        )

    def delete_attachment(self, attachment: PostAttachment) -> None:
        self._db.delete(attachment)
        self._db.commit()
