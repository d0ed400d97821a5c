"""Media URL construction.

Builds references to profile and background images. Nothing is fetched: the
URL is meant for an <img src> or a browser, which is why the media token may
be embedded as a query parameter instead of a header.
"""

import enum

import httpx

from orgwalk.db.directory import CallerError, quote_path_segment


class MediaKind(str, enum.Enum):
    """Kinds of media assets attached to a person."""

    PROFILE_PHOTO = "profile-photo"
    BACKGROUND_PHOTO = "background-photo"


class PhotoVariant(str, enum.Enum):
    """Preferred photo source."""

    CUSTOM = "custom"
    OFFICIAL = "official"


class ImageFit(str, enum.Enum):
    CROP = "crop"
    SCALE = "scale"


def build_media_url(
    base_url: str,
    key: str,
    kind: MediaKind | str = MediaKind.PROFILE_PHOTO,
    preferred_type: PhotoVariant | str | None = None,
    height: int | None = None,
    width: int | None = None,
    fit: ImageFit | str | None = None,
    media_token: str | None = None,
    token_in_query: bool = False,
) -> str:
    """Build the URL of a person's media asset.

    Args:
        base_url: API base URL (e.g., 'https://api.justsift.com/v1')
        key: Person identifier or email
        kind: Asset kind
        preferred_type: Preferred photo variant
        height: Requested height in pixels
        width: Requested width in pixels
        fit: How the image is fitted into the requested box
        media_token: Media token of the client
        token_in_query: Embed the media token as the `token` query parameter

    Returns:
        The absolute media URL.

    Raises:
        CallerError: If the key is empty or an option value is invalid
    """
    if not key or not key.strip():
        raise CallerError("build_media_url: key is required")
    try:
        kind = MediaKind(kind)
        preferred_type = PhotoVariant(preferred_type) if preferred_type else None
        fit = ImageFit(fit) if fit else None
    except ValueError as e:
        raise CallerError(f"build_media_url: {e}") from e

    params: dict[str, str] = {}
    if preferred_type is not None:
        params["preferredType"] = preferred_type.value
    if height is not None:
        params["height"] = str(height)
    if width is not None:
        params["width"] = str(width)
    if fit is not None:
        params["fit"] = fit.value
    if token_in_query and media_token:
        params["token"] = media_token

    path = f"{base_url.rstrip('/')}/media/people/{quote_path_segment(key)}/{kind.value}"
    return str(httpx.URL(path, params=params or None))
