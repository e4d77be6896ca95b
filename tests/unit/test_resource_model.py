from __future__ import annotations

import threading

import pytest

import embedkit.domain.models.resource as resource_module
from embedkit.core.chunks import split_encode
from embedkit.domain.models.resource import Resource, StaticResourceDirectory


def test_resource_requires_at_least_one_chunk() -> None:
    with pytest.raises(ValueError):
        Resource(key="empty", chunks=())


def test_decoded_values_are_memoized() -> None:
    resource = Resource(key="lazy_txt", chunks=split_encode("Lazy content".encode("utf-8")))

    first = resource.as_string
    second = resource.as_string

    assert first == "Lazy content"
    assert first is second
    assert resource.as_bytes is resource.as_bytes


def test_decode_runs_once_under_concurrent_first_access(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    real_join_decode = resource_module.join_decode

    def counting_join_decode(chunks):  # type: ignore[no-untyped-def]
        calls.append(1)
        return real_join_decode(chunks)

    monkeypatch.setattr(resource_module, "join_decode", counting_join_decode)
    resource = Resource(key="shared_bin", chunks=split_encode(b"shared" * 1000, 100))

    barrier = threading.Barrier(8)
    results: list[bytes] = []

    def _read() -> None:
        barrier.wait()
        results.append(resource.as_bytes)

    threads = [threading.Thread(target=_read) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert len(calls) == 1
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_size_counts_full_chunks_and_last_chunk() -> None:
    resource = Resource(key="sized", chunks=split_encode(b"s" * 25, 10), chunk_size=10)
    assert len(resource.chunks) == 3
    assert resource.size == 25


def test_empty_resource_has_zero_size_and_empty_content() -> None:
    resource = Resource(key="empty_txt", chunks=split_encode(b""))
    assert resource.size == 0
    assert resource.as_bytes == b""
    assert resource.as_string == ""


def test_static_directory_lookup_and_paths() -> None:
    class Directory(StaticResourceDirectory):
        key = "demo_app"
        resources = {
            "a.txt": Resource(key="a_txt", chunks=split_encode(b"A")),
            "img/logo.png": Resource(key="img_logo_png", chunks=split_encode(b"PNG")),
        }

    directory = Directory()

    assert directory.key == "demo_app"
    assert directory.lookup("a.txt") is not None
    assert directory.lookup("missing.txt") is None
    assert sorted(directory.all_paths()) == ["a.txt", "img/logo.png"]


def test_static_directory_mapping_is_read_only() -> None:
    class Directory(StaticResourceDirectory):
        key = "frozen"
        resources = {"a.txt": Resource(key="a_txt", chunks=split_encode(b"A"))}

    with pytest.raises(TypeError):
        Directory.resources["b.txt"] = Resource(key="b_txt", chunks=split_encode(b"B"))  # type: ignore[index]
