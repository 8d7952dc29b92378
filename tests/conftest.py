import io

import pytest
from PIL import Image

from photobooth.specs.models.image import ImageMetadata, UploadFile


def make_image_bytes(width, height, fmt="JPEG", color=(20, 40, 200), mode="RGB"):
    buf = io.BytesIO()
    Image.new(mode, (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


def make_upload(name="test.png", type="image/png", data=b"mock image data"):
    return UploadFile.from_bytes(name=name, type=type, data=data)


class FakeImage:
    def __init__(self, label):
        self.label = label
        self.closed = False

    def close(self):
        self.closed = True


class FakeCodec:
    """Records the raster calls the merger makes; can fail at a named step."""

    def __init__(self, width=1248, height=832, encoded=b"encoded image", fail_at=None, error=None):
        self.width = width
        self.height = height
        self.encoded = encoded
        self.fail_at = fail_at
        self.error = error or RuntimeError("codec failed")
        self.calls = []
        self.images = []

    def _step(self, name, *args):
        self.calls.append((name,) + args)
        if self.fail_at == name:
            raise self.error

    def _image(self, label):
        img = FakeImage(label)
        self.images.append(img)
        return img

    def probe(self, data):
        self._step("probe")
        return ImageMetadata(width=self.width, height=self.height, format="jpeg")

    def decode(self, data):
        self._step("decode")
        return self._image("decoded")

    def resize(self, image, width, height, fit="fill"):
        self._step("resize", width, height, fit)
        return self._image(f"resized-{fit}")

    def composite(self, base, overlay, left, top):
        self._step("composite", left, top)
        return self._image("composite")

    def expand(self, image, border, color="#FFFFFF"):
        self._step("expand", border, color)
        return self._image("expanded")

    def encode(self, image, fmt, quality):
        self._step("encode", fmt, quality)
        return self.encoded

    def named(self, name):
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def fake_codec():
    return FakeCodec()


@pytest.fixture
def landscape_jpeg():
    return make_upload("main.jpg", "image/jpeg", make_image_bytes(1920, 1080))


@pytest.fixture
def square_logo_png():
    return make_upload("logo.png", "image/png", make_image_bytes(200, 200, "PNG", (220, 10, 10, 255), "RGBA"))
