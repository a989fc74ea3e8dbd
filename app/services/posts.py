"""Post CRUD and attachment management, authorized against the post's author."""

import logging

from app.core.exceptions import NotFoundError
from app.core.permissions import decide, ensure_allowed, visible_owner_id
from app.models import Post, PostAttachment, Role
from app.repositories.posts import PostRepository
from app.schemas.posts import PostCreate, PostUpdate
from app.services.attachments import AttachmentStore, IncomingFile
from app.services.pagination import Page, page_offset

logger = logging.getLogger(__name__)


class PostService:
    def __init__(self, posts: PostRepository, attachments: AttachmentStore) -> None:
        self._posts = posts
        self._attachments = attachments

    def _load_authorized(self, post_id: int, actor_id: int, actor_role: Role, message: str) -> Post:
        post = self._posts.get(post_id)
        if post is None:
            raise NotFoundError("Post")
        ensure_allowed(decide(actor_role, actor_id, resource_owner_id=post.owner_id), message)
        return post

    def list_posts(
        self,
        actor_id: int,
        actor_role: Role,
        page: int,
        limit: int,
        search: str | None = None,
    ) -> Page[Post]:
        """ADMIN sees every post (published or not), anyone else only their own."""
        search = (search or "").strip() or None
        posts, total = self._posts.find_many(
            visible_owner_id(actor_role, actor_id), page_offset(page, limit), limit, search
        )
        return Page(items=posts, page=page, limit=limit, total=total, search=search)

    def get_post(self, post_id: int, actor_id: int, actor_role: Role) -> Post:
        return self._load_authorized(post_id, actor_id, actor_role, "You can only access your own posts")

    def create_post(self, data: PostCreate, actor_id: int) -> Post:
        post = self._posts.create(Post(**data.model_dump(), author_id=actor_id))
        logger.info("Post created: post_id=%s author_id=%s", post.id, actor_id)
        return post

    def update_post(self, post_id: int, data: PostUpdate, actor_id: int, actor_role: Role) -> Post:
        post = self._load_authorized(post_id, actor_id, actor_role, "You can only update your own posts")
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None
        }
        return self._posts.update(post, changes)

    def delete_post(self, post_id: int, actor_id: int, actor_role: Role) -> None:
        """Remove the post's attachment directory, then the post; attachment rows cascade."""
        post = self._load_authorized(post_id, actor_id, actor_role, "You can only delete your own posts")
        self._attachments.remove_resource_dir(post.id)
        self._posts.delete(post)
        logger.info("Post deleted: post_id=%s actor_id=%s", post_id, actor_id)

    def upload_attachments(
        self, post_id: int, files: list[IncomingFile], actor_id: int, actor_role: Role
    ) -> list[PostAttachment]:
        """
        Attach a batch of files to a post.

        Order of checks: post exists, actor may modify it, then batch and
        per-file validation. Nothing is written unless every file is valid.
        """
        post = self._load_authorized(
            post_id, actor_id, actor_role, "You can only upload files to your own posts"
        )
        return self._attachments.store_batch(post.id, files)

    def delete_attachment(
        self,
        attachment_id: int,
        actor_id: int,
        actor_role: Role,
        post_id: int | None = None,
    ) -> None:
        """
        Unlink the payload, then delete the record. With post_id given, an
        attachment that belongs to another post is reported as not found.
        """
        attachment = self._posts.get_attachment(attachment_id)
        if attachment is None or (post_id is not None and attachment.post_id != post_id):
            raise NotFoundError("File")
        ensure_allowed(
            decide(actor_role, actor_id, resource_owner_id=attachment.post.owner_id),
            "You can only delete files from your own posts",
        )
        self._attachments.remove_file(attachment.path)
        self._posts.delete_attachment(attachment)
        logger.info(
            "Attachment deleted: attachment_id=%s post_id=%s actor_id=%s",
            attachment_id,
            attachment.post_id,
            actor_id,
        )
