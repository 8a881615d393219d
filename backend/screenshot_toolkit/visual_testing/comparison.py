"""
Screenshot Comparison Algorithm

Uses Pillow for decoding and normalization and pixelmatch for the
perceptual pixel-by-pixel comparison of two screenshots.
"""

import asyncio
import base64
import io
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError
from pixelmatch.contrib.PIL import pixelmatch
from pydantic import BaseModel, ConfigDict, Field

from screenshot_toolkit.visual_testing.exceptions import (
    ComparisonError,
    ImageDecodeError,
    ImageIOError,
)

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.1

# Process umask, read once; os.umask can only be queried by setting it
_UMASK = os.umask(0)
os.umask(_UMASK)
DIFF_FILE_MODE = 0o666 & ~_UMASK


@dataclass(frozen=True)
class ImageSize:
    """Intrinsic size of a source image"""

    width: int
    height: int

    def to_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ComparisonMetadata:
    """Source sizes, threshold and timestamp of one comparison"""

    image1_size: ImageSize
    image2_size: ImageSize
    threshold: float
    compared_at: str  # ISO-8601

    def to_dict(self) -> dict[str, Any]:
        return {
            "image1Size": self.image1_size.to_dict(),
            "image2Size": self.image2_size.to_dict(),
            "threshold": self.threshold,
            "comparedAtISO8601": self.compared_at,
        }


@dataclass(frozen=True)
class ComparisonResult:
    """Result of a screenshot comparison"""

    diff_pixels: int
    total_pixels: int
    diff_percentage: float  # 0.0 to 100.0
    diff_image_base64: str  # PNG diff visualization
    metadata: ComparisonMetadata

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape consumed by callers"""
        return {
            "differingPixels": self.diff_pixels,
            "totalPixels": self.total_pixels,
            "diffPercentage": self.diff_percentage,
            "diffImageBase64": self.diff_image_base64,
            "metadata": self.metadata.to_dict(),
        }


class ComparisonRequest(BaseModel):
    """Request to compare two images"""

    model_config = ConfigDict(frozen=True)

    image1_source: Path
    image2_source: Path
    threshold: float = Field(default=DEFAULT_THRESHOLD, ge=0.0, le=1.0)
    output_path: Path | None = None


@contextmanager
def _stage(name: str) -> Iterator[None]:
    """Wrap any non-comparison failure raised inside a pipeline stage"""
    try:
        yield
    except ComparisonError:
        raise
    except Exception as e:
        raise ComparisonError(str(e) or type(e).__name__, stage=name) from e


class ImageComparator:
    """
    Compares screenshots using pixelmatch.

    Both images are downsampled to the element-wise minimum of their sizes
    before comparison. Differing pixels are painted with ``diff_color`` in the
    diff image, the rest are drawn as a faded grayscale copy of the first image.

    Example:
        comparator = ImageComparator()
        result = await comparator.compare(
            ComparisonRequest(image1_source="web.png", image2_source="figma.png")
        )
    """

    def __init__(
        self,
        diff_color: tuple[int, int, int] = (255, 0, 0),
        alpha: float = 0.1,
    ):
        """
        Initialize comparator.

        Args:
            diff_color: Color used to mark differing pixels in the diff image
            alpha: Opacity of the unchanged pixels drawn in the diff image (0-1)
        """
        self.diff_color = diff_color
        self.alpha = alpha

    async def compare(self, request: ComparisonRequest) -> ComparisonResult:
        """
        Compare two screenshots.

        Decoding, resizing and diffing run in a worker thread.

        Args:
            request: Images to compare, threshold and optional diff output path

        Returns:
            ComparisonResult with pixel counts, percentage and diff image

        Raises:
            ImageIOError: If a source cannot be read or the output cannot be written
            ImageDecodeError: If a source is not a decodable raster image
            ComparisonError: For any other failure, tagged with the failing stage
        """
        logger.info(
            f"Comparing images: image1={request.image1_source}, image2={request.image2_source}, "
            f"threshold={request.threshold}"
        )
        result = await asyncio.to_thread(self._compare_sync, request)
        logger.info(
            f"Comparison complete: diff_pixels={result.diff_pixels}/{result.total_pixels} "
            f"({result.diff_percentage:.2f}%)"
        )
        return result

    def _compare_sync(self, request: ComparisonRequest) -> ComparisonResult:
        with _stage("read"):
            data1 = self._read_source(request.image1_source)
            data2 = self._read_source(request.image2_source)

        with _stage("decode"):
            image1 = self._decode(data1, request.image1_source)
            image2 = self._decode(data2, request.image2_source)

        size1 = ImageSize(*image1.size)
        size2 = ImageSize(*image2.size)

        with _stage("normalize"):
            footprint = (min(size1.width, size2.width), min(size1.height, size2.height))
            if footprint[0] <= 0 or footprint[1] <= 0:
                raise ImageDecodeError(
                    f"Images have no comparable area: {size1} vs {size2}", stage="normalize"
                )
            if (size1.width, size1.height) != footprint or (size2.width, size2.height) != footprint:
                logger.warning(
                    f"Image size mismatch: image1={image1.size}, image2={image2.size}, "
                    f"resizing both to {footprint}"
                )
            normalized1 = self._normalize(image1, footprint)
            normalized2 = self._normalize(image2, footprint)

        with _stage("diff"):
            # Zero-initialized RGBA buffer, filled in by pixelmatch
            diff_image = Image.new("RGBA", footprint)
            diff_pixels = pixelmatch(
                normalized1,
                normalized2,
                diff_image,
                threshold=request.threshold,
                alpha=self.alpha,
                diff_color=self.diff_color,
            )

        with _stage("encode"):
            buffer = io.BytesIO()
            diff_image.save(buffer, format="PNG")
            diff_png = buffer.getvalue()
            diff_image_base64 = base64.b64encode(diff_png).decode("ascii")

        total_pixels = footprint[0] * footprint[1]
        result = ComparisonResult(
            diff_pixels=diff_pixels,
            total_pixels=total_pixels,
            diff_percentage=(diff_pixels / total_pixels) * 100,
            diff_image_base64=diff_image_base64,
            metadata=ComparisonMetadata(
                image1_size=size1,
                image2_size=size2,
                threshold=request.threshold,
                compared_at=datetime.now(UTC).isoformat(),
            ),
        )

        if request.output_path is not None:
            with _stage("write"):
                self._write_diff(request.output_path, diff_png)

        return result

    def _read_source(self, path: Path) -> bytes:
        """Read raw image bytes from disk."""
        if not path.is_file():
            raise ImageIOError(f"Image not found: {path}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise ImageIOError(f"Cannot read {path}: {e}") from e

    def _decode(self, data: bytes, source: Path) -> Image.Image:
        """Decode image bytes and force pixel data to load."""
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except UnidentifiedImageError as e:
            raise ImageDecodeError(f"Unrecognized image format: {source}") from e
        except (OSError, ValueError, SyntaxError) as e:
            raise ImageDecodeError(f"Corrupt image data in {source}: {e}") from e
        return image

    def _normalize(self, image: Image.Image, footprint: tuple[int, int]) -> Image.Image:
        """Convert to RGBA and downsample to the comparison footprint."""
        rgba = image.convert("RGBA")
        if rgba.size == footprint:
            return rgba
        return rgba.resize(footprint, Image.Resampling.LANCZOS)

    def _write_diff(self, output_path: Path, diff_png: bytes) -> None:
        """
        Write the diff PNG atomically.

        The bytes go to a temp file next to the target which then replaces it,
        so a failed write never leaves a partial file at output_path.
        """
        tmp_name = None
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=output_path.parent,
                prefix=f".{output_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(diff_png)
            # NamedTemporaryFile creates 0600 files
            os.chmod(tmp_name, DIFF_FILE_MODE)
            os.replace(tmp_name, output_path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise ImageIOError(f"Cannot write diff image to {output_path}: {e}", stage="write") from e

        logger.info(f"Saved diff image to: {output_path}")
