"""Tests for root resolution and the descending-path filter."""
from pathlib import Path

from conftest import FakeBackend, FakeProject

from gitfixup.roots import RootResolver, canonical_path, filter_descending_paths


def test_resolve_collects_roots_of_committable_backends():
    """Backends without check-in capability or not active are skipped."""
    project = FakeProject([
        FakeBackend(["/work/a", "/work/b"]),
        FakeBackend(["/work/readonly"], checkin=False),
        FakeBackend(["/work/inactive"], active=False),
        FakeBackend(["/work/c"], name="hg"),
    ])

    roots = RootResolver().resolve(project)

    assert roots == [Path("/work/a"), Path("/work/b"), Path("/work/c")]


def test_resolve_canonicalises_roots():
    project = FakeProject([FakeBackend(["/work/a/../b/", "/work//c/."])])
    assert RootResolver().resolve(project) == [Path("/work/b"), Path("/work/c")]


def test_resolve_without_project_is_empty():
    assert RootResolver().resolve(None) == []


def test_resolve_disposed_project_is_empty():
    project = FakeProject([FakeBackend(["/work/a"])])
    project.dispose()
    assert RootResolver().resolve(project) == []


def test_filter_removes_nested_roots():
    roots = [Path("/work/repo/sub"), Path("/work/repo"), Path("/work/other"), Path("/work/repo/sub/deeper")]
    assert filter_descending_paths(roots) == [Path("/work/repo"), Path("/work/other")]


def test_filter_removes_duplicates_and_keeps_order():
    roots = [Path("/b"), Path("/a"), Path("/b")]
    assert filter_descending_paths(roots) == [Path("/b"), Path("/a")]


def test_filter_does_not_treat_name_prefix_as_ancestor():
    """/work/repo2 shares a prefix with /work/repo but is not inside it."""
    roots = [Path("/work/repo"), Path("/work/repo2")]
    assert filter_descending_paths(roots) == roots


def test_filter_is_idempotent():
    roots = [Path("/x/y"), Path("/x"), Path("/z"), Path("/z/w"), Path("/q")]
    once = filter_descending_paths(roots)
    assert filter_descending_paths(once) == once
    for path in once:
        assert not any(other in path.parents for other in once)


def test_filter_empty():
    assert filter_descending_paths([]) == []


def test_canonical_path_is_absolute():
    assert canonical_path("relative/dir").is_absolute()
