"""Product photo capture from a USB or built-in camera using OpenCV."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path


@dataclass
class CameraCapture:
    camera_index: int
    image_path: str
    captured_at: str  # ISO8601


class ProductCamera:
    """Take a photo of a product to attach to its record."""

    def __init__(self, camera_index: int = 0, save_dir: str = "/tmp/skincare") -> None:
        self._camera_index = camera_index
        self._save_dir = Path(save_dir)
        self._save_dir.mkdir(parents=True, exist_ok=True)

    def capture(self, camera_index: int | None = None) -> CameraCapture:
        """Capture a single frame and save it as JPEG."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install 'skincare-organizer[camera]'"
            ) from None

        if camera_index is None:
            camera_index = self._camera_index

        cap = cv2.VideoCapture(camera_index)
        if not cap.isOpened():
            raise RuntimeError(
                f"Could not open camera {camera_index}. Check that it is connected."
            )

        try:
            ret, frame = cap.read()
            if not ret or frame is None:
                raise RuntimeError(
                    f"Could not read a frame from camera {camera_index}."
                )

            now = datetime.now(timezone.utc)
            timestamp = now.strftime("%Y%m%d_%H%M%S")
            filepath = self._save_dir / f"product_{timestamp}.jpg"

            cv2.imwrite(str(filepath), frame)

            return CameraCapture(
                camera_index=camera_index,
                image_path=str(filepath),
                captured_at=now.isoformat(),
            )
        finally:
            cap.release()

    @staticmethod
    def list_cameras(max_check: int = 10) -> list[int]:
        """List available camera indices by probing."""
        try:
            import cv2
        except ImportError:
            raise ImportError(
                "opencv-python is required: pip install 'skincare-organizer[camera]'"
            ) from None

        available: list[int] = []
        for i in range(max_check):
            cap = cv2.VideoCapture(i)
            if cap.isOpened():
                available.append(i)
                cap.release()
        return available
