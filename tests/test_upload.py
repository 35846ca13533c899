import pytest

from frontdesk.routes import upload


class FakeBucket:
    def __init__(self, fail=False):
        self.fail = fail
        self.objects = {}

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail:
            raise RuntimeError("bucket unavailable")
        self.objects[Key] = (Bucket, Body, ContentType)


@pytest.fixture
def bucket(monkeypatch):
    fake = FakeBucket()
    monkeypatch.setattr(upload, "get_r2_client", lambda: fake)
    monkeypatch.setattr(upload, "R2_PUBLIC_URL", "https://cdn.acme.test/")
    return fake


def test_missing_file(client):
    response = client.post("/api/upload-photo")
    assert response.status_code == 400
    assert response.json() == {"error": "No file provided"}


def test_rejects_non_images(client, bucket):
    response = client.post("/api/upload-photo", files={"file": ("notes.txt", b"hello", "text/plain")})
    assert response.status_code == 400
    assert "Invalid file type" in response.json()["error"]
    assert bucket.objects == {}


def test_rejects_oversized_photos(client, bucket, monkeypatch):
    monkeypatch.setattr(upload, "MAX_PHOTO_SIZE", 4)
    response = client.post("/api/upload-photo", files={"file": ("face.png", b"12345", "image/png")})
    assert response.status_code == 400
    assert response.json()["error"].startswith("File too large")


def test_stores_photo_and_returns_public_url(client, bucket):
    response = client.post("/api/upload-photo", files={"file": ("face.jpeg", b"\xff\xd8\xff", "image/jpeg")})
    assert response.status_code == 200

    (key, (bucket_name, body, content_type)), = bucket.objects.items()
    assert key.startswith("visitor-photos/")
    assert key.endswith(".jpg")
    assert body == b"\xff\xd8\xff"
    assert content_type == "image/jpeg"
    assert response.json() == {"url": f"https://cdn.acme.test/{key}"}


def test_storage_failure(client, bucket):
    bucket.fail = True
    response = client.post("/api/upload-photo", files={"file": ("face.webp", b"RIFF", "image/webp")})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to upload photo"}
