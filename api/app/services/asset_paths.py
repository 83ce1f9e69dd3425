"""Asset slots and storage path construction."""

import re
import time
import unicodedata
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import unquote, urlsplit


@dataclass(frozen=True)
class AssetSlot:
    """One of the three asset references an artwork carries."""

    name: str
    field: str
    folder: str
    fallback_ext: str


HTML = AssetSlot(name="html", field="html_url", folder="html", fallback_ext="html")
PREVIEW = AssetSlot(name="preview", field="preview_video_url", folder="previews", fallback_ext="mp4")
THUMB = AssetSlot(name="thumb", field="thumb_url", folder="thumbnails", fallback_ext="jpg")

SLOTS: Dict[str, AssetSlot] = {slot.name: slot for slot in (HTML, PREVIEW, THUMB)}

CONTENT_TYPE_EXTENSIONS = {
    "text/html": "html",
    "video/mp4": "mp4",
    "image/jpeg": "jpg",
    "image/png": "png",
}

DISAMBIGUATOR_DIGITS = 6


def get_slot(name: str) -> AssetSlot:
    """Look up a slot by name.

    Raises:
        KeyError: If the slot name is unknown
    """
    return SLOTS[name]


def slugify(text: str) -> str:
    """Turn a title into a lowercase ASCII slug.

    Examples:
        >>> slugify("Sunset Study")
        'sunset-study'
        >>> slugify("  Café  Noir!! ")
        'cafe-noir'
    """
    normalized = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", normalized.lower()).strip("-")
    return slug or "artwork"


def make_disambiguator(now_ms: Optional[int] = None) -> str:
    """Last six digits of the millisecond clock.

    Distinct for edits more than a millisecond apart within a ~16 minute
    window, which is what matters for repeated saves of the same title.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return str(now_ms)[-DISAMBIGUATOR_DIGITS:]


def extension_for(filename: Optional[str], content_type: Optional[str], fallback: str) -> str:
    """Pick a file extension from the filename suffix, then the MIME type.

    Examples:
        >>> extension_for("Sunset.PNG", "image/png", "jpg")
        'png'
        >>> extension_for("blob", "video/mp4", "mp4")
        'mp4'
        >>> extension_for("blob", "application/x-unknown", "jpg")
        'jpg'
    """
    name = (filename or "").rsplit("/", 1)[-1]
    dot = name.rfind(".")
    if dot != -1 and dot < len(name) - 1:
        return name[dot + 1:].lower()

    mime = (content_type or "").split(";", 1)[0].strip().lower()
    return CONTENT_TYPE_EXTENSIONS.get(mime, fallback)


def path_base(title: str, disambiguator: str) -> str:
    """Shared stem for every file written in one create or edit."""
    return f"{slugify(title)}-{disambiguator}"


def build_asset_path(
    slot: AssetSlot,
    base: str,
    filename: Optional[str],
    content_type: Optional[str],
) -> str:
    """Build ``{folder}/{base}.{ext}`` for a slot.

    Examples:
        >>> build_asset_path(THUMB, "sunset-study-123456", "sunset.png", "image/png")
        'thumbnails/sunset-study-123456.png'
    """
    ext = extension_for(filename, content_type, slot.fallback_ext)
    return f"{slot.folder}/{base}.{ext}"


def filename_from_url(url: Optional[str]) -> Optional[str]:
    """Last path segment of a locator, or None."""
    if not url:
        return None
    try:
        path = urlsplit(url).path
    except ValueError:
        return None
    last = unquote(path.rsplit("/", 1)[-1])
    return last or None
