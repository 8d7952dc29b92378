import io

from PIL import Image, ImageOps, UnidentifiedImageError

from photobooth.specs.common.errors import DecodeError
from photobooth.specs.models.image import ImageMetadata


TRANSPARENT = (255, 255, 255, 0)

# Pillow format names keyed by the output format strings callers use.
_ENCODERS = {
    "jpeg": "JPEG",
    "png": "PNG",
    "webp": "WEBP",
}


class PillowCodec:
    """Raster operations the compositor needs, backed by Pillow.

    The merger only talks to this interface (probe, decode, resize,
    composite, expand, encode) so another codec can be dropped in.
    """

    def probe(self, data: bytes) -> ImageMetadata:
        """Read the header only; pixel data is never decoded."""
        try:
            with Image.open(io.BytesIO(data)) as img:
                return ImageMetadata(
                    width=img.width,
                    height=img.height,
                    format=(img.format or "").lower() or None,
                    mode=img.mode,
                    hasAlpha="A" in img.getbands() or "transparency" in img.info,
                )
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(f"Unable to read image metadata: {exc}") from exc

    def decode(self, data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise DecodeError(f"Unable to decode image: {exc}") from exc
        try:
            return img.convert("RGBA")
        finally:
            img.close()

    def resize(self, image: Image.Image, width: int, height: int, fit: str = "fill") -> Image.Image:
        if fit == "fill":
            return image.resize((width, height), Image.Resampling.LANCZOS)
        if fit == "contain":
            fitted = ImageOps.contain(image, (width, height), Image.Resampling.LANCZOS)
            box = Image.new("RGBA", (width, height), TRANSPARENT)
            offset = ((width - fitted.width) // 2, (height - fitted.height) // 2)
            box.alpha_composite(fitted.convert("RGBA"), offset)
            fitted.close()
            return box
        raise ValueError(f"Unsupported fit mode: {fit}")

    def composite(self, base: Image.Image, overlay: Image.Image, left: int, top: int) -> Image.Image:
        out = base.convert("RGBA")
        out.alpha_composite(overlay.convert("RGBA"), (left, top))
        return out

    def expand(self, image: Image.Image, border: int, color: str = "#FFFFFF") -> Image.Image:
        # Flatten first so the border and any transparent pixels end up opaque.
        flat = _flatten(image, color)
        if border <= 0:
            return flat
        return ImageOps.expand(flat, border=border, fill=color)

    def encode(self, image: Image.Image, fmt: str, quality: int) -> bytes:
        pil_format = _ENCODERS.get(fmt, "JPEG")
        buf = io.BytesIO()
        if pil_format == "JPEG":
            _flatten(image).save(buf, format="JPEG", quality=quality)
        elif pil_format == "WEBP":
            image.save(buf, format="WEBP", quality=quality)
        else:
            image.save(buf, format="PNG", optimize=True)
        return buf.getvalue()


def _flatten(image: Image.Image, color: str = "#FFFFFF") -> Image.Image:
    if image.mode != "RGBA":
        return image.convert("RGB")
    background = Image.new("RGB", image.size, color)
    background.paste(image, mask=image.getchannel("A"))
    return background

