import io

from PIL import Image

from conftest import auth_header
from reclaim.routers import items as items_router
from reclaim.routers import media as media_router
from reclaim.utils import s3_service


def png_bytes(width=2000, height=1000):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_compress_image_limits_width():
    buffer, ext = s3_service.compress_image(png_bytes())

    assert ext in ("webp", "jpg")
    assert Image.open(buffer).size == (1400, 700)


def test_resolve_photo_ref(monkeypatch):
    monkeypatch.setattr(s3_service, "generate_signed_url", lambda key: f"signed://{key}")

    assert s3_service.resolve_photo_ref("https://example.org/a.jpg") == "https://example.org/a.jpg"
    assert s3_service.resolve_photo_ref("uploads/a-1.webp") == "signed://uploads/a-1.webp"
    assert s3_service.resolve_photo_ref(None) is None


def test_upload_endpoint(client, monkeypatch):
    uploaded = {}

    def fake_upload(buffer, ext, name):
        uploaded["name"] = name
        return f"uploads/photo-1.{ext}"

    monkeypatch.setattr(media_router, "upload_to_s3", fake_upload)
    monkeypatch.setattr(media_router, "generate_signed_url", lambda key: f"signed://{key}")

    res = client.post(
        "/media/upload",
        files={"image": ("wallet.png", png_bytes(), "image/png")},
        headers=auth_header("user1"),
    )

    assert res.status_code == 200
    assert res.json()["key"].startswith("uploads/photo-1.")
    assert uploaded["name"] == "wallet.png"


def test_upload_rejects_non_images(client):
    res = client.post(
        "/media/upload",
        files={"image": ("notes.txt", b"not an image", "text/plain")},
        headers=auth_header("user1"),
    )
    assert res.status_code == 400


def test_report_with_photo_upload(client, store, monkeypatch):
    monkeypatch.setattr(items_router, "upload_to_s3", lambda buffer, ext, name: "uploads/found-1.webp")
    monkeypatch.setattr(s3_service, "generate_signed_url", lambda key: f"signed://{key}")

    res = client.post(
        "/items/create",
        data={
            "item_type": "Laptop",
            "location": "Computer Lab - Room 302",
            "date_found": "2025-10-05",
            "time_found": "09:00",
            "question1": "What brand is the laptop?",
            "answer1": "dell",
        },
        files={"image": ("laptop.png", png_bytes(400, 300), "image/png")},
        headers=auth_header("user1"),
    )

    assert res.status_code == 200, res.text
    item = store.reports.list_reports()[0]
    assert item.photo_ref == "uploads/found-1.webp"

    res = client.get(f"/items/{item.id}", headers=auth_header("user1"))
    assert res.json()["item"]["photo_ref"] == "signed://uploads/found-1.webp"


def test_report_rejects_unreadable_photo(client, store):
    res = client.post(
        "/items/create",
        data={
            "item_type": "Laptop",
            "location": "Computer Lab - Room 302",
            "date_found": "2025-10-05",
            "time_found": "09:00",
            "question1": "What brand is the laptop?",
            "answer1": "dell",
        },
        files={"image": ("laptop.png", b"not an image", "image/png")},
        headers=auth_header("user1"),
    )

    assert res.status_code == 400
    assert store.reports.list_reports() == []
