"""Tests for media reference extraction."""

from __future__ import annotations

from proofmark.services import MediaReferenceScanner
from proofmark.services.scanner import build_reference_patterns, extract_references


def test_each_reference_shape_is_recognised() -> None:
    text = "\n".join(
        [
            "![cover](/media/a/cover.jpg)",
            "![rel](../../../Media/b/rel.png)",
            "image: '/media/c/hero.webp'",
            '<img src="/media/d/inline.gif" />',
            "<video controls src='/media/e/clip.mp4'></video>",
        ]
    )

    found = extract_references(text, build_reference_patterns())

    assert found == [
        "a/cover.jpg",
        "b/rel.png",
        "c/hero.webp",
        "d/inline.gif",
        "e/clip.mp4",
    ]


def test_same_path_via_every_pattern_is_reported_once(site) -> None:
    site.write_doc(
        "posts",
        "all.md",
        "---\n"
        "title: All\n"
        "image: /media/shared/photo.jpg\n"
        "---\n"
        "![one](/media/shared/photo.jpg)\n"
        "![two](../../../Media/shared/photo.jpg)\n"
        '<img src="/media/shared/photo.jpg">\n',
    )

    scanner = MediaReferenceScanner(site.library())

    assert scanner.scan() == ["shared/photo.jpg"]


def test_scan_unions_documents_and_categories(site) -> None:
    site.write_doc("posts", "one.md", "![x](/media/x.jpg)")
    site.write_doc("notes", "two.md", "![x](/media/x.jpg) ![y](/media/y.png)")
    site.write_doc("notes", "ignored.txt", "![z](/media/z.png)")
    site.write_doc("drafts", "other.md", "![w](/media/w.png)")

    references = MediaReferenceScanner(site.library()).scan()

    assert sorted(references) == ["x.jpg", "y.png"]


def test_missing_files_are_still_reported(site) -> None:
    site.write_doc("pieces", "gone.md", "![gone](/media/not/here.jpg)")

    assert MediaReferenceScanner(site.library()).scan() == ["not/here.jpg"]


def test_custom_url_prefix(site) -> None:
    site.write_doc("posts", "a.md", "![a](/assets/a.jpg) ![b](/media/b.jpg)")

    scanner = MediaReferenceScanner(site.library(), url_prefix="/assets")

    assert scanner.scan() == ["a.jpg"]
