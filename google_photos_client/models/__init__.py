"""Models for Google Photos Client."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Album:
    """Represents an album in Google Photos."""
    id: str
    title: str
    product_url: str = ""
    media_items_count: int = 0
    cover_photo_base_url: str = ""
    cover_photo_media_item_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Album":
        """Build an album from an API ``albums`` entry."""
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            product_url=data.get("productUrl", ""),
            media_items_count=int(data.get("mediaItemsCount", 0)),
            cover_photo_base_url=data.get("coverPhotoBaseUrl", ""),
            cover_photo_media_item_id=data.get("coverPhotoMediaItemId", ""),
        )


@dataclass(frozen=True)
class CameraMetadata:
    """Camera details reported for still photos."""
    camera_make: str = ""
    camera_model: str = ""
    focal_length: float = 0.0
    aperture_f_number: float = 0.0
    iso_equivalent: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CameraMetadata":
        return cls(
            camera_make=data.get("cameraMake", ""),
            camera_model=data.get("cameraModel", ""),
            focal_length=float(data.get("focalLength", 0.0)),
            aperture_f_number=float(data.get("apertureFNumber", 0.0)),
            iso_equivalent=int(data.get("isoEquivalent", 0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cameraMake": self.camera_make,
            "cameraModel": self.camera_model,
            "focalLength": self.focal_length,
            "apertureFNumber": self.aperture_f_number,
            "isoEquivalent": self.iso_equivalent,
        }


@dataclass(frozen=True)
class PhotoMetadata:
    """Media metadata attached to a photo."""
    creation_time: str = ""
    width: int = 0
    height: int = 0
    camera: Optional[CameraMetadata] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PhotoMetadata":
        camera = data.get("photo")
        return cls(
            creation_time=data.get("creationTime", ""),
            width=int(data.get("width", 0)),
            height=int(data.get("height", 0)),
            camera=CameraMetadata.from_dict(camera) if camera is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        # The API reports dimensions as strings.
        data: Dict[str, Any] = {
            "creationTime": self.creation_time,
            "width": str(self.width),
            "height": str(self.height),
        }
        if self.camera is not None:
            data["photo"] = self.camera.to_dict()
        return data


@dataclass(frozen=True)
class Photo:
    """Represents a media item in Google Photos.

    ``base_url`` is only servable for a limited time after the item was
    fetched; nothing in the item itself says when it expires.
    """
    id: str
    base_url: str = ""
    product_url: str = ""
    mime_type: str = ""
    filename: str = ""
    metadata: PhotoMetadata = field(default_factory=PhotoMetadata)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Photo":
        """Build a photo from an API ``mediaItems`` entry or a cache record.

        Raises:
            KeyError: If the item has no id
            ValueError: If a numeric field cannot be parsed
        """
        return cls(
            id=data["id"],
            base_url=data.get("baseUrl", ""),
            product_url=data.get("productUrl", ""),
            mime_type=data.get("mimeType", ""),
            filename=data.get("filename", ""),
            metadata=PhotoMetadata.from_dict(data.get("mediaMetadata", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the API field layout."""
        return {
            "id": self.id,
            "baseUrl": self.base_url,
            "productUrl": self.product_url,
            "mimeType": self.mime_type,
            "filename": self.filename,
            "mediaMetadata": self.metadata.to_dict(),
        }


class GooglePhotosError(Exception):
    """Base exception for Google Photos operations."""


class ApiError(GooglePhotosError):
    """Raised when API calls fail."""


class UnauthorizedError(ApiError):
    """Raised when the API rejects the access token."""


class BadStatusError(ApiError):
    """Raised when the API answers with an unexpected HTTP status."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class TransportError(ApiError):
    """Raised when the API could not be reached."""


class DecodeError(ApiError):
    """Raised when an API response cannot be decoded."""


class ClientError(GooglePhotosError):
    """Base exception for failed client operations."""


class RefreshTokenError(ClientError):
    """Raised when the access token could not be refreshed."""


class GetAlbumError(ClientError):
    """Raised when albums could not be fetched."""


class SearchPhotosError(ClientError):
    """Raised when album photos could not be fetched."""


class TruncateError(ClientError):
    """Raised when the cached album could not be cleared."""


class SaveError(ClientError):
    """Raised when fetched photos could not be cached."""


class DatabaseError(GooglePhotosError):
    """Database error exception."""


class AlbumNotExistsError(DatabaseError):
    """Raised when an album has no cached photos."""


class PhotoDecodeError(DatabaseError):
    """Raised when a cached photo cannot be decoded."""
