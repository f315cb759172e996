"""
Avatar upload pipeline.

Moves an uploaded temporary file to the remote media store, releases the
local file, and stores the resulting URL on the user record.
"""

from pathlib import Path

from app.config import settings
from app.core.errors import BadRequest, HttpError, RepositoryError, UpstreamServiceError
from app.core.logging import get_logger
from app.repositories.user import UserLookup, UserRepository
from app.services.media import MediaStore, UploadedMedia, avatar_transformation

logger = get_logger(__name__)


def discard_upload(path: Path) -> None:
    """Delete a temporary upload. Failures are logged, never raised."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("avatar_temp_cleanup_failed", path=str(path), error=str(e))


async def _upload(media: MediaStore, path: Path, user_id: int) -> UploadedMedia:
    """Upload under the avatar folder, addressed by the user id."""
    try:
        return await media.upload(
            path,
            namespace=settings.AVATAR_FOLDER,
            object_id=str(user_id),
        )
    except HttpError:
        raise
    except Exception as e:
        raise UpstreamServiceError("Failed to upload avatar") from e
    finally:
        discard_upload(path)


async def update_avatar(
    users: UserRepository,
    media: MediaStore,
    *,
    user_id: int,
    upload_path: Path | None,
    transform: bool | None = None,
) -> str | None:
    """
    Replace the avatar of ``user_id`` with the uploaded file.

    Steps run strictly in order:
    1. Upload the file to the media store (object id = user id, so a new
       avatar overwrites the previous one)
    2. Delete the local file, whatever the upload outcome
    3. Optionally derive the transformed (square, rounded, bordered) URL
    4. Store the URL on the user record

    Args:
        users: User repository
        media: Remote media store
        user_id: ID of the caller
        upload_path: Temporary file written by the transport layer, or None
        transform: Derive the transformed URL; defaults to
            settings.AVATAR_APPLY_TRANSFORMATION

    Returns:
        The avatar URL stored on the user record

    Raises:
        BadRequest: no file was supplied
        UpstreamServiceError: the upload failed
        NotFound: the user record no longer exists
        RepositoryError: the record could not be updated
    """
    if upload_path is None:
        raise BadRequest("Please send the file")

    if transform is None:
        transform = settings.AVATAR_APPLY_TRANSFORMATION

    uploaded = await _upload(media, upload_path, user_id)

    if transform:
        avatar_url = media.build_transformed_url(uploaded, avatar_transformation())
    else:
        avatar_url = uploaded.public_url

    try:
        user = await users.update(UserLookup.by_id(user_id), {"avatar_url": avatar_url})
    except HttpError:
        raise
    except Exception as e:
        raise RepositoryError("Failed to save avatar") from e

    logger.info(
        "avatar_updated",
        user_id=user_id,
        object_id=uploaded.object_id,
        transformed=transform,
    )
    return user.avatar_url
