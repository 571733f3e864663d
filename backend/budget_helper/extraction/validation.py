from typing import Optional

from budget_helper.extraction.exceptions import FileValidationError
from budget_helper.extraction.schemas import SourceFile

# Magic bytes dla obsługiwanych formatów (obrazy + PDF)
ALLOWED_MAGIC_BYTES = {
    b'\xff\xd8\xff': 'image/jpeg',
    b'\x89\x50\x4e\x47': 'image/png',
    b'GIF87a': 'image/gif',
    b'GIF89a': 'image/gif',
    b'%PDF-': 'application/pdf',
}


def detect_media_type(content: bytes) -> Optional[str]:
    for magic, mime in ALLOWED_MAGIC_BYTES.items():
        if content.startswith(magic):
            return mime
    # WEBP: RIFF....WEBP
    if content[:4] == b'RIFF' and content[8:12] == b'WEBP':
        return 'image/webp'
    return None


def declared_image_type(content_type: Optional[str]) -> Optional[str]:
    """Normalised `image/*` type declared by the client, None for anything else."""
    if not content_type:
        return None
    media_type = content_type.split(";", 1)[0].strip().lower()
    # SVG to tekst (XML), nie obraz rastrowy
    if not media_type.startswith("image/") or media_type in ("image/", "image/svg+xml"):
        return None
    return media_type


def validate_upload(
    name: Optional[str],
    content: bytes,
    max_size: int,
    declared_type: Optional[str] = None,
) -> SourceFile:
    """
    Waliduje plik: rozmiar i magic bytes.

    Typ MIME jest ustalany na podstawie zawartości, nie nagłówka od klienta.
    Wyjątek: obrazy w formatach bez rozpoznawanych magic bytes (HEIC, BMP,
    TIFF...) przechodzą, jeśli klient zadeklarował typ `image/*`; wtedy
    używany jest zadeklarowany typ.

    Raises:
        FileValidationError: pusty, zbyt duży lub nieobsługiwany plik
    """
    file_name = name or "upload"

    if len(content) < 4:
        raise FileValidationError(f"{file_name}: file is empty or corrupted")

    if len(content) > max_size:
        raise FileValidationError(
            f"{file_name}: file too large. Max size: {max_size / (1024 * 1024):.0f}MB"
        )

    media_type = detect_media_type(content) or declared_image_type(declared_type)
    if not media_type:
        raise FileValidationError(
            f"{file_name}: invalid file format. Allowed: JPEG, PNG, WEBP, GIF, PDF or another image/* type"
        )

    return SourceFile(name=file_name, media_type=media_type, content=content)
