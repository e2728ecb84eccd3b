import cv2
import numpy as np
import pytest

from scalemask.errors import ImageDecodeError, ImageEncodeError, ImageIOError
from scalemask.imaging import ImageSink, ImageSource

from tests.helpers.fake_images import make_legend, read_rgba, write_rgb

pytestmark = [pytest.mark.unit, pytest.mark.integration]


class TestImageSource:

    def test_loads_rgb_in_rgb_order(self, temp_dir):
        rgb = make_legend(rows=4, width=3)
        path = write_rgb(temp_dir / "legend.png", rgb)

        loaded = ImageSource().load(path)

        assert loaded.shape == (4, 3, 3)
        assert loaded.dtype == np.uint8
        np.testing.assert_array_equal(loaded, rgb)

    def test_loaded_grid_is_read_only(self, temp_dir):
        path = write_rgb(temp_dir / "legend.png", make_legend(rows=2, width=2))
        loaded = ImageSource().load(path)
        with pytest.raises(ValueError):
            loaded[0, 0, 0] = 1

    def test_missing_file(self, temp_dir):
        with pytest.raises(ImageDecodeError, match="cannot read file"):
            ImageSource().load(temp_dir / "nope.png")

    def test_empty_file(self, temp_dir):
        path = temp_dir / "empty.png"
        path.write_bytes(b"")
        with pytest.raises(ImageDecodeError, match="empty"):
            ImageSource().load(path)

    def test_not_an_image(self, temp_dir):
        path = temp_dir / "corrupt.png"
        path.write_bytes(b"this is not an image at all")
        with pytest.raises(ImageDecodeError) as exc_info:
            ImageSource().load(path)
        assert exc_info.value.path == str(path)

    def test_decode_error_is_image_io_error(self):
        assert issubclass(ImageDecodeError, ImageIOError)


class TestImageSink:

    def test_round_trip_preserves_rgba(self, temp_dir):
        grid = np.zeros((2, 3, 4), dtype=np.uint8)
        grid[0, 0] = (0, 0, 255, 127)
        grid[1, 2] = (10, 20, 30, 255)

        path = ImageSink().save(grid, temp_dir / "out.png")

        assert path == temp_dir / "out.png"
        np.testing.assert_array_equal(read_rgba(path), grid)

    def test_unwritable_destination(self, temp_dir):
        grid = np.zeros((1, 1, 4), dtype=np.uint8)
        with pytest.raises(ImageEncodeError):
            ImageSink().save(grid, temp_dir / "missing_dir" / "out.png")


def _with_exif_orientation(jpeg: bytes, orientation: int) -> bytes:
    """Insert a big-endian EXIF APP1 segment holding only an Orientation tag."""
    tiff = (
        b"MM\x00\x2a\x00\x00\x00\x08"      # header, IFD0 at offset 8
        + b"\x00\x01"                      # one entry
        + b"\x01\x12\x00\x03\x00\x00\x00\x01"  # tag 0x0112, SHORT, count 1
        + orientation.to_bytes(2, "big") + b"\x00\x00"
        + b"\x00\x00\x00\x00"              # no next IFD
    )
    payload = b"Exif\x00\x00" + tiff
    app1 = b"\xff\xe1" + (len(payload) + 2).to_bytes(2, "big") + payload
    return jpeg[:2] + app1 + jpeg[2:]


def test_exif_orientation_is_not_applied(temp_dir):
    """Overlay dimensions must match the stored pixel grid."""
    rgb = np.zeros((2, 6, 3), dtype=np.uint8)
    ok, jpeg = cv2.imencode(".jpg", rgb)
    assert ok
    path = temp_dir / "rotated.jpg"
    path.write_bytes(_with_exif_orientation(jpeg.tobytes(), 6))

    loaded = ImageSource().load(path)

    assert loaded.shape == (2, 6, 3)
