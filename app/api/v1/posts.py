"""Post endpoints, including multipart attachment upload and per-file deletion."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from app.api.deps import CurrentUserDep, PageParams, get_post_service
from app.schemas.common import ApiResponse, PaginationMeta
from app.schemas.posts import AttachmentOut, PostCreate, PostOut, PostUpdate
from app.services.attachments import MAX_FILE_SIZE, IncomingFile
from app.services.posts import PostService

router = APIRouter()

PostServiceDep = Annotated[PostService, Depends(get_post_service)]


def _incoming(upload: UploadFile) -> IncomingFile:
    # One byte past the limit is enough to reject an oversized file without reading all of it.
    data = upload.file.read(MAX_FILE_SIZE + 1)
    return IncomingFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


@router.get("", response_model=ApiResponse[list[PostOut]])
def list_posts(
    current_user: CurrentUserDep,
    posts: PostServiceDep,
    paging: Annotated[PageParams, Depends()],
    search: Annotated[str | None, Query(max_length=255, description="Matches title or content")] = None,
) -> ApiResponse[list[PostOut]]:
    page = posts.list_posts(current_user.id, current_user.role, paging.page, paging.limit, search)
    return ApiResponse(
        data=[PostOut.model_validate(post) for post in page.items],
        meta=PaginationMeta.from_page(page),
    )


@router.post("", response_model=ApiResponse[PostOut], status_code=status.HTTP_201_CREATED)
def create_post(body: PostCreate, current_user: CurrentUserDep, posts: PostServiceDep) -> ApiResponse[PostOut]:
    post = posts.create_post(body, current_user.id)
    return ApiResponse(message="Post created", data=PostOut.model_validate(post))


@router.get("/{post_id}", response_model=ApiResponse[PostOut])
def get_post(post_id: int, current_user: CurrentUserDep, posts: PostServiceDep) -> ApiResponse[PostOut]:
    post = posts.get_post(post_id, current_user.id, current_user.role)
    return ApiResponse(data=PostOut.model_validate(post))


@router.put("/{post_id}", response_model=ApiResponse[PostOut])
def update_post(
    post_id: int,
    body: PostUpdate,
    current_user: CurrentUserDep,
    posts: PostServiceDep,
) -> ApiResponse[PostOut]:
    post = posts.update_post(post_id, body, current_user.id, current_user.role)
    return ApiResponse(message="Post updated", data=PostOut.model_validate(post))


@router.delete("/{post_id}", response_model=ApiResponse[None])
def delete_post(post_id: int, current_user: CurrentUserDep, posts: PostServiceDep) -> ApiResponse[None]:
    """Delete the post together with every attachment record and file."""
    posts.delete_post(post_id, current_user.id, current_user.role)
    return ApiResponse(message="Post deleted")


@router.post(
    "/{post_id}/files",
    response_model=ApiResponse[list[AttachmentOut]],
    status_code=status.HTTP_201_CREATED,
)
def upload_files(
    post_id: int,
    current_user: CurrentUserDep,
    posts: PostServiceDep,
    files: Annotated[list[UploadFile] | None, File(description="Up to 10 files, 5 MB each")] = None,
) -> ApiResponse[list[AttachmentOut]]:
    """
    Attach files to a post (multipart field "files", repeated). Allowed types:
    JPEG, PNG, GIF, WebP, PDF, DOC, DOCX and plain text. The batch is rejected
    as a whole if any file is invalid.
    """
    incoming = [_incoming(upload) for upload in files or []]
    created = posts.upload_attachments(post_id, incoming, current_user.id, current_user.role)
    return ApiResponse(
        message=f"{len(created)} file(s) uploaded",
        data=[AttachmentOut.model_validate(attachment) for attachment in created],
    )


@router.delete("/{post_id}/files/{file_id}", response_model=ApiResponse[None])
def delete_file(
    post_id: int,
    file_id: int,
    current_user: CurrentUserDep,
    posts: PostServiceDep,
) -> ApiResponse[None]:
    posts.delete_attachment(file_id, current_user.id, current_user.role, post_id=post_id)
    return ApiResponse(message="File deleted")
