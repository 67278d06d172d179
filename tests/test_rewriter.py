"""Tests for cache-driven reference rewriting."""

from __future__ import annotations

from proofmark.services import CacheEntry, SubstringReferenceRewriter, url_mappings
from proofmark.services.rewriter import replace_references


def _seed_cache(site, entries: dict[str, str]) -> None:
    site.cache().save(
        {path: CacheEntry(hash="h", url=url, public_id=f"p/{path}") for path, url in entries.items()}
    )


def test_replaces_every_occurrence_and_leaves_other_files_alone(site) -> None:
    _seed_cache(site, {"foo/bar.jpg": "https://cdn/x.jpg"})
    target = site.write_doc(
        "posts",
        "target.md",
        "![one](/media/foo/bar.jpg)\n\n<img src=\"/media/foo/bar.jpg\">\n",
    )
    other = site.write_doc("notes", "other.md", "plain text, ![o](/media/other.jpg)\n")
    other_mtime = other.stat().st_mtime_ns

    result = SubstringReferenceRewriter(site.library(), site.cache()).rewrite()

    assert result.files_scanned == 2
    assert result.files_modified == 1
    assert result.urls_replaced == 2
    assert [(c.file, c.replacements) for c in result.changes] == [("posts/target.md", 2)]
    assert target.read_text(encoding="utf-8") == (
        "![one](https://cdn/x.jpg)\n\n<img src=\"https://cdn/x.jpg\">\n"
    )
    assert other.read_text(encoding="utf-8") == "plain text, ![o](/media/other.jpg)\n"
    assert other.stat().st_mtime_ns == other_mtime


def test_dry_run_counts_but_does_not_write(site) -> None:
    _seed_cache(site, {"a.jpg": "https://cdn/a.jpg", "b.png": "https://cdn/b.png"})
    original = "![a](/media/a.jpg) ![b](/media/b.png) ![a](/media/a.jpg)"
    path = site.write_doc("pieces", "p.md", original)

    dry = SubstringReferenceRewriter(site.library(), site.cache()).rewrite(dry_run=True)

    assert dry.urls_replaced == 3
    assert dry.files_modified == 1
    assert path.read_text(encoding="utf-8") == original

    real = SubstringReferenceRewriter(site.library(), site.cache()).rewrite()
    assert real.urls_replaced == dry.urls_replaced


def test_second_pass_finds_nothing(site) -> None:
    _seed_cache(site, {"a.jpg": "https://cdn/a.jpg"})
    site.write_doc("posts", "p.md", "![a](/media/a.jpg)")
    rewriter = SubstringReferenceRewriter(site.library(), site.cache())

    rewriter.rewrite()
    second = rewriter.rewrite()

    assert second.files_modified == 0
    assert second.urls_replaced == 0


def test_empty_cache_scans_without_modifying(site) -> None:
    site.write_doc("posts", "p.md", "![a](/media/a.jpg)")

    result = SubstringReferenceRewriter(site.library(), site.cache()).rewrite()

    assert result.files_scanned == 1
    assert result.files_modified == 0


def test_replace_references_is_literal() -> None:
    text, count = replace_references(
        "see /media/a+b.jpg and /media/a+b.jpg",
        {"/media/a+b.jpg": "https://cdn/ab.jpg"},
    )

    assert count == 2
    assert text == "see https://cdn/ab.jpg and https://cdn/ab.jpg"


def test_url_mappings_use_local_reference_form() -> None:
    entries = {"x/y.jpg": CacheEntry(hash="h", url="https://cdn/y.jpg", public_id="p")}

    assert url_mappings(entries) == {"/media/x/y.jpg": "https://cdn/y.jpg"}
    assert url_mappings(entries, "/assets/") == {"/assets/x/y.jpg": "https://cdn/y.jpg"}
