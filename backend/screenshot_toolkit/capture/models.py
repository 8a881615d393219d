"""
Capture data models
"""

import base64
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator

from screenshot_toolkit.core.exceptions import ValidationError

FIGMA_HOSTS = ("figma.com", "figjam.com")
FIGMA_PATH_PATTERN = re.compile(r"^/(?:file|design|board|proto)/([a-zA-Z0-9]+)(?:/|$)")


class CaptureFormat(str, Enum):
    """Output format of a capture"""

    PNG = "PNG"
    JPG = "JPG"
    SVG = "SVG"
    PDF = "PDF"


MIME_TYPES: dict[CaptureFormat, str] = {
    CaptureFormat.PNG: "image/png",
    CaptureFormat.JPG: "image/jpeg",
    CaptureFormat.SVG: "image/svg+xml",
    CaptureFormat.PDF: "application/pdf",
}


def mime_type_for(format: CaptureFormat | str) -> str:
    """Return the MIME type for a capture format, image/png if unknown"""
    if isinstance(format, CaptureFormat):
        return MIME_TYPES[format]
    try:
        return MIME_TYPES[CaptureFormat(format.upper())]
    except ValueError:
        return "image/png"


class ClipRegion(BaseModel):
    """Pixel rectangle to capture"""

    x: float
    y: float
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return not self.width or not self.height


class CaptureTarget(BaseModel):
    """What to capture and how"""

    model_config = ConfigDict(frozen=True)

    url: HttpUrl
    format: CaptureFormat = CaptureFormat.PNG
    scale: float = Field(default=1.0, ge=0.1, le=4.0)
    quality: int = Field(default=90, ge=1, le=100)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)
    wait_for_selector: str | None = None
    wait_for_timeout: int = Field(default=2000, gt=0)  # milliseconds
    full_page: bool = False
    clip: ClipRegion | None = None
    wait_for_network_idle: bool = True
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = "networkidle"

    @field_validator("format", mode="before")
    @classmethod
    def _upper_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.upper()
            if value == "JPEG":
                return "JPG"
        return value


@dataclass(frozen=True)
class FigmaFileRef:
    """File key and optional node of a Figma link"""

    file_key: str
    node_id: str | None = None


def parse_figma_url(url: str) -> FigmaFileRef:
    """
    Extract the file key and node id from a Figma link

    Args:
        url: Figma or FigJam URL, e.g. https://www.figma.com/design/AbC123/Name?node-id=1-2

    Returns:
        FigmaFileRef

    Raises:
        ValidationError: If the URL is not a Figma file link
    """
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if not any(host == h or host.endswith(f".{h}") for h in FIGMA_HOSTS):
        raise ValidationError(f"Not a Figma URL: {url}")

    match = FIGMA_PATH_PATTERN.match(parsed.path)
    if not match:
        raise ValidationError(
            f"Invalid Figma URL format: {url}",
            recovery_hint="Use a link like https://www.figma.com/file/<key>/<name>",
        )

    node_ids = parse_qs(parsed.query).get("node-id")
    return FigmaFileRef(file_key=match.group(1), node_id=node_ids[0] if node_ids else None)


class FigmaCaptureTarget(CaptureTarget):
    """Capture target pointing at a Figma or FigJam file"""

    node_id: str | None = None

    @field_validator("url")
    @classmethod
    def _must_be_figma_file(cls, value: HttpUrl) -> HttpUrl:
        try:
            parse_figma_url(str(value))
        except ValidationError as e:
            raise ValueError(e.message) from e
        return value


@dataclass
class CaptureResult:
    """Captured image bytes and capture metadata"""

    image_bytes: bytes
    mime_type: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def image_base64(self) -> str:
        return base64.b64encode(self.image_bytes).decode("ascii")
