"""Tests for the media sync loop."""

from __future__ import annotations

import json

from proofmark.services import MediaReferenceScanner, MediaSyncService, UploadCache

from conftest import StubUploader


def _service(site, uploader) -> MediaSyncService:
    return MediaSyncService(
        MediaReferenceScanner(site.library()),
        site.cache(),
        uploader,
        media_root=site.media,
    )


def test_uploads_referenced_files_and_records_cache(site, uploader) -> None:
    site.write_media("a.jpg", b"aaa")
    site.write_media("clips/b.mp4", b"bbbb")
    site.write_doc("posts", "p.md", "![a](/media/a.jpg)\n<video src=\"/media/clips/b.mp4\">")

    result = _service(site, uploader).sync()

    assert (result.scanned, result.uploaded, result.skipped, result.failed) == (2, 2, 0, 0)
    assert [upload.local for upload in result.uploads] == ["a.jpg", "clips/b.mp4"]
    assert result.uploads[1].size == 4
    cache = site.cache().load()
    assert cache["a.jpg"].url == "https://cdn.example.com/v1/a.jpg"
    assert cache["clips/b.mp4"].public_id == "casey-site/clips/b"
    assert cache["a.jpg"].uploaded_at.endswith("Z")


def test_second_run_skips_everything(site, uploader) -> None:
    site.write_media("a.jpg", b"aaa")
    site.write_media("b.png", b"bbb")
    site.write_doc("posts", "p.md", "![a](/media/a.jpg) ![b](/media/b.png)")
    service = _service(site, uploader)

    service.sync()
    second = service.sync()

    assert second.uploaded == 0
    assert second.skipped == 2
    assert uploader.calls == ["a.jpg", "b.png"]


def test_changed_bytes_trigger_single_reupload(site, uploader) -> None:
    site.write_media("a.jpg", b"v1")
    site.write_media("b.png", b"stable")
    site.write_doc("notes", "n.md", "![a](/media/a.jpg) ![b](/media/b.png)")
    service = _service(site, uploader)
    service.sync()
    before = site.cache().load()["a.jpg"]

    site.write_media("a.jpg", b"v2")
    result = service.sync()

    after = site.cache().load()["a.jpg"]
    assert result.uploaded == 1
    assert result.skipped == 1
    assert uploader.calls[-1] == "a.jpg"
    assert after.hash != before.hash
    assert after.url != before.url


def test_force_reuploads_cached_files(site, uploader) -> None:
    site.write_media("a.jpg")
    site.write_doc("posts", "p.md", "![a](/media/a.jpg)")
    service = _service(site, uploader)
    service.sync()

    result = service.sync(force=True)

    assert result.uploaded == 1
    assert result.skipped == 0


def test_dry_run_counts_without_touching_cache(site, uploader) -> None:
    site.write_media("a.jpg", b"new")
    site.write_media("b.png", b"cached")
    site.write_doc("posts", "p.md", "![b](/media/b.png)")
    service = _service(site, uploader)
    service.sync()
    site.write_doc("posts", "p.md", "![a](/media/a.jpg) ![b](/media/b.png)")
    snapshot = site.cache_path.read_text(encoding="utf-8")
    calls_before = list(uploader.calls)

    result = service.sync(dry_run=True)

    assert result.uploaded == 1
    assert result.skipped == 1
    assert result.uploads == []
    assert uploader.calls == calls_before
    assert site.cache_path.read_text(encoding="utf-8") == snapshot

    real = service.sync()
    assert real.uploaded == result.uploaded


def test_dry_run_never_creates_cache_file(site, uploader) -> None:
    site.write_media("a.jpg")
    site.write_doc("posts", "p.md", "![a](/media/a.jpg)")

    _service(site, uploader).sync(dry_run=True)

    assert not site.cache_path.exists()


def test_missing_and_failed_uploads_are_isolated(site) -> None:
    uploader = StubUploader(site.media, fail_on={"bad.jpg"})
    site.write_media("ok.jpg")
    site.write_media("bad.jpg")
    site.write_doc(
        "projects",
        "p.md",
        "![m](/media/missing.jpg) ![b](/media/bad.jpg) ![o](/media/ok.jpg)",
    )

    result = _service(site, uploader).sync()

    assert result.scanned == 3
    assert result.uploaded == 1
    assert result.failed == 2
    assert result.errors[0] == "File not found: missing.jpg"
    assert result.errors[1].startswith("Upload failed: bad.jpg")
    assert "missing.jpg" not in uploader.calls
    persisted = json.loads(site.cache_path.read_text(encoding="utf-8"))
    assert list(persisted) == ["ok.jpg"]


def test_unreadable_file_does_not_lose_earlier_uploads(site, uploader, monkeypatch) -> None:
    site.write_media("ok.jpg")
    locked = site.write_media("locked.jpg")
    site.write_doc("posts", "p.md", "![o](/media/ok.jpg) ![l](/media/locked.jpg)")
    real_hash = UploadCache.hash_file

    def _hash(path):
        if path == locked:
            raise PermissionError("permission denied")
        return real_hash(path)

    monkeypatch.setattr(UploadCache, "hash_file", staticmethod(_hash))

    result = _service(site, uploader).sync()

    assert result.uploaded == 1
    assert result.failed == 1
    assert result.errors == ["Upload failed: locked.jpg (permission denied)"]
    assert uploader.calls == ["ok.jpg"]
    assert list(site.cache().load()) == ["ok.jpg"]
