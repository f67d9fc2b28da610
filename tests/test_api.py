from __future__ import annotations

import base64
import io
import zipfile

import pytest
from PIL import Image

pytest.importorskip("httpx")
from fastapi.testclient import TestClient

from imagepress import app
from imagepress.api import deps
from imagepress.config import CompressionConfig
from imagepress.core.service import ImageCompressionService


def _payload(data_uri: str) -> bytes:
    header, encoded = data_uri.split(",", 1)
    assert header.endswith(";base64")
    return base64.b64decode(encoded)


@pytest.fixture()
def client(service):
    app.dependency_overrides[deps.get_compression_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_compress_png_to_jpeg(client, png_bytes) -> None:
    response = client.post(
        "/api/compress",
        files={"file": ("photo.png", png_bytes, "image/png")},
        data={"quality": "70", "format": "jpeg"},
    )
    assert response.status_code == 200, response.text
    body = response.json()

    assert body["success"] is True
    assert body["originalSize"] == len(png_bytes)
    assert body["originalDimensions"] == {"width": 64, "height": 32}
    assert body["compressedDimensions"] == {"width": 64, "height": 32}
    assert body["compressionRatio"].endswith("%")
    assert body["compressedImage"].startswith("data:image/jpeg;base64,")

    output = _payload(body["compressedImage"])
    assert len(output) == body["compressedSize"]
    with Image.open(io.BytesIO(output)) as image:
        assert image.format == "JPEG"


def test_resize_keeping_aspect_ratio(client, jpeg_bytes) -> None:
    response = client.post(
        "/api/compress",
        files={"file": ("photo.jpg", jpeg_bytes, "image/jpeg")},
        data={"width": "32", "height": "32", "format": "webp", "maintainAspectRatio": "true"},
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["compressedDimensions"] == {"width": 32, "height": 16}
    assert body["compressedImage"].startswith("data:image/webp;base64,")


def test_settings_default_when_absent(client, webp_bytes) -> None:
    response = client.post(
        "/api/compress",
        files={"file": ("photo.webp", webp_bytes, "image/webp")},
    )
    assert response.status_code == 200, response.text
    assert response.json()["compressedImage"].startswith("data:image/jpeg;base64,")


def test_invalid_type_is_rejected(client, png_bytes) -> None:
    response = client.post(
        "/api/compress",
        files={"file": ("photo.gif", png_bytes, "image/gif")},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type or file too large"}


def test_missing_file(client) -> None:
    response = client.post("/api/compress", data={"quality": "80"})
    assert response.status_code == 400
    assert response.json() == {"error": "No files found"}


def test_undecodable_file(client) -> None:
    response = client.post(
        "/api/compress",
        files={"file": ("photo.png", b"this is not a png", "image/png")},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Could not decode image"}


def test_oversized_file(png_bytes) -> None:
    small = ImageCompressionService(CompressionConfig(max_file_size=10))
    app.dependency_overrides[deps.get_compression_service] = lambda: small
    try:
        with TestClient(app) as client:
            response = client.post(
                "/api/compress",
                files={"file": ("photo.png", png_bytes, "image/png")},
            )
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 400
    assert "error" in response.json()


def test_batch_returns_zip(client, png_bytes, jpeg_bytes) -> None:
    response = client.post(
        "/api/compress-batch",
        files=[
            ("files", ("first.png", png_bytes, "image/png")),
            ("files", ("second.jpg", jpeg_bytes, "image/jpeg")),
        ],
        data={"format": "png", "quality": "90"},
    )
    assert response.status_code == 200, response.text
    body = response.json()

    assert body["success"] is True
    names = [item["compressedName"] for item in body["results"]]
    assert names == ["compressed_first.png", "compressed_second.png"]
    assert body["totalOriginalSize"] == len(png_bytes) + len(jpeg_bytes)
    assert body["totalCompressedSize"] == sum(item["compressedSize"] for item in body["results"])

    archive_bytes = _payload(body["zipFile"])
    assert body["zipFile"].startswith("data:application/zip;base64,")
    assert body["zipSize"] == len(archive_bytes)
    with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
        assert archive.namelist() == names


def test_batch_aborts_on_broken_item(client, png_bytes) -> None:
    response = client.post(
        "/api/compress-batch",
        files=[
            ("files", ("ok.png", png_bytes, "image/png")),
            ("files", ("broken.png", b"garbage", "image/png")),
            ("files", ("later.png", png_bytes, "image/png")),
        ],
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process file: broken.png"}


def test_batch_rejects_invalid_item_up_front(client, png_bytes) -> None:
    response = client.post(
        "/api/compress-batch",
        files=[
            ("files", ("ok.png", png_bytes, "image/png")),
            ("files", ("notes.txt", b"hello", "text/plain")),
        ],
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid file type or file too large: notes.txt"}


def test_empty_batch(client) -> None:
    response = client.post("/api/compress-batch", data={"format": "png"})
    assert response.status_code == 400
    assert response.json() == {"error": "No files found"}


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health(client) -> None:
    response = client.get("/health/detailed")
    assert response.status_code == 200
    body = response.json()
    assert set(body["codecs"]) == {"jpeg", "png", "webp"}
    assert "cpu_usage" in body["system"]
    assert body["limits"]["max_file_size"] > 0
