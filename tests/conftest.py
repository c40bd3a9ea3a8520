"""Test configuration for pytest."""

import sys
import pytest
from pathlib import Path
from typing import Callable, Generator, List

# Add the project root directory to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from google_photos_client.database.db_manager import DatabaseManager  # noqa: E402
from google_photos_client.models import CameraMetadata, Photo, PhotoMetadata  # noqa: E402


@pytest.fixture
def test_db_path(tmp_path: Path) -> Path:
    """Path of a temporary cache database."""
    return tmp_path / "test.db"


@pytest.fixture(scope="function")
def db_manager(test_db_path: Path) -> Generator[DatabaseManager, None, None]:
    """Create a connected test database manager."""
    manager = DatabaseManager(str(test_db_path))
    manager.connect()
    yield manager
    manager.close()


@pytest.fixture
def make_photos() -> Callable[..., List[Photo]]:
    """Build numbered photos, e.g. make_photos(3, prefix="new")."""

    def factory(count: int, prefix: str = "photo") -> List[Photo]:
        return [
            Photo(
                id=f"{prefix}_{i}",
                base_url=f"https://lh3.googleusercontent.com/{prefix}_{i}",
                product_url=f"https://photos.google.com/lr/photo/{prefix}_{i}",
                mime_type="image/jpeg",
                filename=f"{prefix}_{i}.jpg",
                metadata=PhotoMetadata(
                    creation_time="2024-01-01T00:00:00Z",
                    width=1920,
                    height=1080,
                    camera=CameraMetadata(
                        camera_make="Canon",
                        camera_model="EOS R6",
                        focal_length=35.0,
                        aperture_f_number=1.8,
                        iso_equivalent=100,
                    ),
                ),
            )
            for i in range(count)
        ]

    return factory
