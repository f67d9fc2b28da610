from __future__ import annotations

import io
import zipfile

import pytest
from PIL import Image

from imagepress.core.archive import ImageArchive
from imagepress.core.batch import BatchArchiver, BatchPolicy, archive_entry_name
from imagepress.core.transcoder import Transcoder
from imagepress.core.validator import Validator
from imagepress.errors import BatchItemError, EmptyBatchError, ValidationError
from imagepress.models.domain import BatchItem, CompressionSettings, OutputFormat


class CountingTranscoder(Transcoder):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[bytes] = []

    def transcode(self, source_bytes, settings):  # type: ignore[override]
        self.calls.append(source_bytes)
        return super().transcode(source_bytes, settings)


def _item(name: str, data: bytes, mime: str = "image/png") -> BatchItem:
    return BatchItem(name=name, source_bytes=data, declared_mime_type=mime, declared_size=len(data))


@pytest.fixture()
def transcoder() -> CountingTranscoder:
    return CountingTranscoder()


@pytest.fixture()
def archiver(transcoder) -> BatchArchiver:
    return BatchArchiver(Validator(), transcoder)


def test_archive_entry_name() -> None:
    assert archive_entry_name("photo.png", OutputFormat.JPEG) == "compressed_photo.jpg"
    assert archive_entry_name("photo.final.png", OutputFormat.WEBP) == "compressed_photo.final.webp"
    assert archive_entry_name("noext", OutputFormat.PNG) == "compressed_noext.png"
    assert archive_entry_name("a.png", "bmp") == "compressed_a.jpg"
    assert archive_entry_name("a.png", OutputFormat.PNG, prefix="small_") == "small_a.png"


@pytest.mark.parametrize(
    "original_name",
    ["../../x.png", "/etc/x.png", "uploads/x.png", "..\\..\\x.png", "C:\\Users\\me\\x.png"],
)
def test_archive_entry_name_drops_directories(original_name) -> None:
    assert archive_entry_name(original_name, OutputFormat.JPEG) == "compressed_x.jpg"


def test_archive_entries_stay_inside_extraction_dir(archiver, png_bytes) -> None:
    items = [_item("../../evil.png", png_bytes)]
    result = archiver.compress_batch(items, CompressionSettings(output_format=OutputFormat.PNG))

    assert result.results[0].original_name == "../../evil.png"
    with zipfile.ZipFile(io.BytesIO(result.archive)) as archive:
        assert archive.namelist() == ["compressed_evil.png"]


def test_batch_success(archiver, transcoder, png_bytes, jpeg_bytes, webp_bytes) -> None:
    items = [
        _item("one.png", png_bytes),
        _item("two.jpg", jpeg_bytes, "image/jpeg"),
        _item("three.webp", webp_bytes, "image/webp"),
    ]
    result = archiver.compress_batch(items, CompressionSettings(quality=60, output_format=OutputFormat.JPEG))

    assert len(transcoder.calls) == 3
    assert [r.original_name for r in result.results] == ["one.png", "two.jpg", "three.webp"]
    assert [r.compressed_name for r in result.results] == [
        "compressed_one.jpg",
        "compressed_two.jpg",
        "compressed_three.jpg",
    ]
    assert result.total_original_size == len(png_bytes) + len(jpeg_bytes) + len(webp_bytes)
    assert result.total_compressed_size == sum(r.compressed_size for r in result.results)
    assert result.archive_size == len(result.archive)

    with zipfile.ZipFile(io.BytesIO(result.archive)) as archive:
        assert archive.namelist() == [r.compressed_name for r in result.results]
        for summary in result.results:
            data = archive.read(summary.compressed_name)
            assert len(data) == summary.compressed_size
            with Image.open(io.BytesIO(data)) as image:
                assert image.format == "JPEG"
                assert image.size == (64, 32)


def test_failing_item_aborts_batch(archiver, transcoder, png_bytes) -> None:
    items = [
        _item("a.png", png_bytes),
        _item("b.png", png_bytes),
        _item("broken.png", b"not really a png"),
        _item("c.png", png_bytes),
    ]
    with pytest.raises(BatchItemError) as exc_info:
        archiver.compress_batch(items, CompressionSettings())

    assert exc_info.value.item_name == "broken.png"
    assert "broken.png" in exc_info.value.message
    # items after the failure are never transcoded
    assert len(transcoder.calls) == 3


def test_empty_batch_is_rejected(archiver, transcoder) -> None:
    with pytest.raises(EmptyBatchError) as exc_info:
        archiver.compress_batch([], CompressionSettings())
    assert exc_info.value.message == "No files found"
    assert transcoder.calls == []


def test_validation_is_all_or_nothing(archiver, transcoder, png_bytes) -> None:
    items = [
        _item("good.png", png_bytes),
        _item("notes.txt", b"hello", "text/plain"),
    ]
    with pytest.raises(ValidationError) as exc_info:
        archiver.compress_batch(items, CompressionSettings())

    assert exc_info.value.item_name == "notes.txt"
    assert exc_info.value.message.endswith(": notes.txt")
    assert transcoder.calls == []


def test_name_collisions_last_write_wins(archiver, make_image) -> None:
    first = make_image("PNG", size=(10, 10))
    second = make_image("PNG", size=(20, 20))
    items = [_item("a.png", first), _item("a.jpg", second, "image/jpeg")]

    result = archiver.compress_batch(items, CompressionSettings(output_format=OutputFormat.PNG))

    assert len(result.results) == 2
    with zipfile.ZipFile(io.BytesIO(result.archive)) as archive:
        assert archive.namelist() == ["compressed_a.png"]
        with Image.open(io.BytesIO(archive.read("compressed_a.png"))) as image:
            assert image.size == (20, 20)


def test_default_policy() -> None:
    archiver = BatchArchiver(Validator(), Transcoder())
    assert archiver.policy is BatchPolicy.ABORT_ON_FIRST_FAILURE


def test_policy_is_coerced_and_checked() -> None:
    archiver = BatchArchiver(Validator(), Transcoder(), policy="abort_on_first_failure")
    assert archiver.policy is BatchPolicy.ABORT_ON_FIRST_FAILURE
    with pytest.raises(ValueError):
        BatchArchiver(Validator(), Transcoder(), policy="skip_failures")


def test_image_archive_keeps_insertion_order() -> None:
    archive = ImageArchive()
    archive.add_entry("b.jpg", b"1")
    archive.add_entry("a.jpg", b"2")
    archive.add_entry("b.jpg", b"3")

    assert archive.names == ["b.jpg", "a.jpg"]
    assert len(archive) == 2
    with zipfile.ZipFile(io.BytesIO(archive.serialize())) as zip_file:
        assert zip_file.read("b.jpg") == b"3"
        assert zip_file.infolist()[0].compress_type == zipfile.ZIP_DEFLATED
