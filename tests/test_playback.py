import os

import pytest

from lightbox.directory import DirectoryIndex
from lightbox.playback import PlaybackManager
from lightbox.types import LoadNext, LoadPrevious, LoadSpecific


@pytest.fixture
def manager(decoder):
    return PlaybackManager(decode=decoder)


def _name(path):
    return os.path.basename(path) if path else None


def _load(manager, path):
    manager.request(LoadSpecific(str(path)))
    return manager.tick()


def test_first_tick_is_idle(manager):
    assert manager.tick() is False
    assert manager.idle_hint()
    assert manager.current_image() is None


def test_open_middle_file_fills_window(manager, image_dir, decoder):
    assert _load(manager, image_dir / "b.png") is True

    image = manager.current_image()
    assert _name(image.path) == "b.png"
    assert manager.listing.index == 1
    assert sorted(_name(p) for p in manager.cache.paths) == ["a.png", "b.png", "c.png"]
    assert decoder.calls[0].endswith("b.png")
    assert not manager.idle_hint()

    assert manager.tick() is False
    assert manager.idle_hint()


def test_next_uses_prefetched_image(manager, image_dir, decoder):
    _load(manager, image_dir / "b.png")
    calls = len(decoder.calls)

    manager.request(LoadNext())
    assert manager.tick() is True

    assert _name(manager.current_path) == "c.png"
    assert len(decoder.calls) == calls
    assert manager.cache.get_stats()["hits"] >= 1


def test_next_wraps_to_first(manager, image_dir):
    _load(manager, image_dir / "c.png")
    manager.request(LoadNext())
    manager.tick()
    assert manager.listing.index == 0
    assert _name(manager.current_image().path) == "a.png"
    assert sorted(_name(p) for p in manager.cache.paths) == ["a.png", "b.png", "c.png"]


def test_previous_wraps_to_last(manager, image_dir):
    _load(manager, image_dir / "a.png")
    manager.request(LoadPrevious())
    manager.tick()
    assert _name(manager.current_path) == "c.png"


def test_next_then_previous_returns_to_start(manager, image_dir):
    _load(manager, image_dir / "b.png")
    start = manager.current_image()
    manager.request(LoadNext())
    manager.tick()
    manager.request(LoadPrevious())
    manager.tick()
    assert manager.current_image() is start


def test_full_cycle_stays_within_window(tmp_path, make_image, manager):
    for c in "abcde":
        make_image(tmp_path / f"{c}.png")
    _load(manager, tmp_path / "a.png")
    start = manager.current_path

    for _ in range(5):
        manager.request(LoadNext())
        manager.tick()
        assert len(manager.cache) <= 3
        assert manager.current_path in manager.cache
        assert manager.current_image().path == manager.listing.current_path

    assert manager.current_path == start


def test_idle_tick_changes_nothing(manager, image_dir, decoder):
    _load(manager, image_dir / "a.png")
    manager.tick()
    calls = len(decoder.calls)
    image = manager.current_image()
    paths = sorted(manager.cache.paths)

    for _ in range(3):
        assert manager.tick() is False
        assert manager.idle_hint()

    assert len(decoder.calls) == calls
    assert manager.current_image() is image
    assert sorted(manager.cache.paths) == paths


def test_requests_coalesce(manager, image_dir, decoder):
    manager.request(LoadNext())
    manager.request(LoadSpecific(str(image_dir / "a.png")))
    manager.request(LoadSpecific(str(image_dir / "c.png")))
    manager.tick()

    assert _name(manager.current_path) == "c.png"
    assert isinstance(manager.last_request, LoadSpecific)
    assert not manager.has_pending_request


def test_next_on_empty_listing_is_a_no_op(manager, decoder):
    manager.request(LoadNext())
    assert manager.tick() is False
    assert manager.current_image() is None
    assert decoder.calls == []


def test_decode_failure_keeps_listing(manager, image_dir, decoder):
    bad = str(image_dir / "b.png")
    decoder.fail.add(bad)

    assert _load(manager, bad) is False
    assert manager.current_image() is None
    assert manager.last_error().path == bad
    assert len(manager.listing) == 3
    assert bad not in manager.cache

    # the failed neighbour is not retried while idle
    manager.tick()
    assert manager.idle_hint()
    assert decoder.count(bad) == 1

    manager.request(LoadNext())
    manager.tick()
    assert _name(manager.current_path) == "c.png"
    assert manager.last_error() is None

    decoder.fail.clear()
    manager.request(LoadPrevious())
    manager.tick()
    assert manager.current_image().path == bad
    assert decoder.count(bad) == 2


def test_missing_file_reports_error(manager, image_dir):
    missing = str(image_dir / "zzz.png")
    _load(manager, missing)

    assert manager.current_image() is None
    assert manager.listing.is_empty
    assert manager.current_path == missing
    assert manager.last_error() is not None

    manager.tick()
    assert manager.idle_hint()

    manager.request(LoadNext())
    assert manager.tick() is False


def test_load_of_file_deleted_since_scan(manager, image_dir):
    _load(manager, image_dir / "a.png")
    deleted = str(image_dir / "c.png")
    os.remove(deleted)

    manager.request(LoadSpecific(deleted))
    manager.tick()

    assert manager.listing.is_empty
    assert manager.current_image() is None
    assert manager.last_error().path == deleted
    assert manager.cache.paths == []

    assert manager.refresh_directory() is False
    assert manager.current_image() is None
    assert manager.last_error().path == deleted


def test_refresh_keeps_failure_of_step_onto_deleted_file(manager, tmp_path, make_image):
    for c in "abcde":
        make_image(tmp_path / f"{c}.png")
    _load(manager, tmp_path / "b.png")
    deleted = str(tmp_path / "d.png")
    os.remove(deleted)

    manager.request(LoadNext())
    manager.tick()
    manager.request(LoadNext())
    manager.tick()
    assert manager.current_path == deleted
    assert manager.last_error().path == deleted

    assert manager.refresh_directory() is False
    assert manager.current_image() is None
    assert manager.current_path == deleted
    assert manager.last_error().path == deleted
    assert [_name(p) for p in manager.listing.entries] == ["a.png", "b.png", "c.png", "e.png"]

    manager.request(LoadNext())
    manager.tick()
    assert manager.current_image() is not None
    assert manager.last_error() is None


def test_missing_directory_reports_error(manager, tmp_path, memory_log):
    _load(manager, tmp_path / "gone" / "a.png")
    assert manager.listing.is_empty
    assert manager.current_image() is None
    assert manager.last_error() is not None
    assert memory_log.find("[DIR][ERR]")


def test_unlisted_extension_is_still_shown(manager, image_dir, make_image):
    path = make_image(image_dir / "d.bin", fmt="PNG")
    assert _load(manager, path) is True
    assert manager.current_image().path == path
    assert manager.listing.is_empty
    assert manager.cache.paths == [path]


def test_same_directory_reuses_listing(decoder, image_dir, tmp_path_factory, make_image):
    index = DirectoryIndex()
    manager = PlaybackManager(decode=decoder, directory_index=index)

    _load(manager, image_dir / "a.png")
    _load(manager, image_dir / "c.png")
    assert index.scans == 1

    manager.invalidate_directory()
    _load(manager, image_dir / "b.png")
    assert index.scans == 2

    other = tmp_path_factory.mktemp("other")
    _load(manager, make_image(other / "x.png"))
    assert index.scans == 3


def test_new_file_in_listing_triggers_rescan(decoder, image_dir, make_image):
    index = DirectoryIndex()
    manager = PlaybackManager(decode=decoder, directory_index=index)
    _load(manager, image_dir / "a.png")

    new = make_image(image_dir / "b2.png")
    _load(manager, new)

    assert index.scans == 2
    assert manager.current_path == new


def test_refresh_picks_up_new_file(manager, image_dir, make_image):
    _load(manager, image_dir / "a.png")
    make_image(image_dir / "d.png")

    assert manager.refresh_directory() is False
    assert len(manager.listing) == 4
    assert sorted(_name(p) for p in manager.cache.paths) == ["a.png", "b.png"]

    manager.tick()
    assert not manager.idle_hint()
    assert sorted(_name(p) for p in manager.cache.paths) == ["a.png", "b.png", "d.png"]

    manager.tick()
    assert manager.idle_hint()


def test_refresh_after_current_file_vanished(manager, image_dir):
    _load(manager, image_dir / "b.png")
    os.remove(image_dir / "b.png")

    assert manager.refresh_directory() is True
    assert _name(manager.current_path) == "c.png"
    assert [_name(p) for p in manager.listing.entries] == ["a.png", "c.png"]
    assert not any(p.endswith("b.png") for p in manager.cache.paths)


def test_refresh_after_directory_emptied(manager, image_dir):
    _load(manager, image_dir / "a.png")
    for name in ("a.png", "b.png", "c.png"):
        os.remove(image_dir / name)

    assert manager.refresh_directory() is True
    assert manager.current_image() is None
    assert manager.current_path is None
    assert manager.listing.is_empty
    assert len(manager.cache) == 0


def test_refresh_without_listing_does_nothing(manager):
    assert manager.refresh_directory() is False


def test_evicted_images_reach_callback(decoder, tmp_path, make_image):
    for c in "abcde":
        make_image(tmp_path / f"{c}.png")
    evicted = []
    manager = PlaybackManager(decode=decoder, on_evict=evicted.append)

    _load(manager, tmp_path / "a.png")
    manager.request(LoadNext())
    manager.tick()

    assert [_name(img.path) for img in evicted] == ["e.png"]


def test_prefetch_disabled_decodes_on_idle(decoder, image_dir):
    manager = PlaybackManager(decode=decoder, prefetch_on_load=False, prefetch_budget=1)
    _load(manager, image_dir / "b.png")
    assert len(manager.cache) == 1

    manager.tick()
    manager.tick()
    assert len(manager.cache) == 3
    assert not manager.idle_hint()

    manager.tick()
    assert manager.idle_hint()


def test_shutdown_releases_everything(manager, image_dir):
    _load(manager, image_dir / "a.png")
    manager.shutdown()
    assert len(manager.cache) == 0
    assert manager.current_image() is None
    assert manager.listing.is_empty
