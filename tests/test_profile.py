import shutil
from pathlib import Path

import pytest

from tabtrail.browser.errors import ProfileNotFoundError
from tabtrail.browser.profile import ProfileLocator, default_candidates
from tabtrail.config import Settings


def make_profile(root: Path, *, history: bool = True, bookmarks: bool = False) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    if history:
        (root / "History").write_bytes(b"")
    if bookmarks:
        (root / "Bookmarks").write_text("{}", encoding="utf-8")
    return root


def test_locate_returns_first_candidate_with_history(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    first = make_profile(tmp_path / "first")
    make_profile(tmp_path / "second")

    locator = ProfileLocator([tmp_path / "missing", empty, first, tmp_path / "second"])
    paths = locator.locate()

    assert paths.root == first
    assert paths.history == first / "History"
    assert paths.bookmarks == first / "Bookmarks"


def test_bookmarks_only_profile_is_accepted(tmp_path: Path) -> None:
    root = make_profile(tmp_path / "bm", history=False, bookmarks=True)
    assert ProfileLocator([root]).locate().root == root


def test_not_found_lists_searched_paths(tmp_path: Path) -> None:
    locator = ProfileLocator([tmp_path / "a", tmp_path / "b"])

    with pytest.raises(ProfileNotFoundError) as excinfo:
        locator.locate()

    message = str(excinfo.value)
    assert "Chrome installation not found" in message
    assert str(tmp_path / "a") in message
    assert str(tmp_path / "b") in message


def test_locate_is_cached_across_filesystem_changes(tmp_path: Path) -> None:
    root = make_profile(tmp_path / "profile")
    locator = ProfileLocator([root])

    first = locator.locate()
    shutil.rmtree(root)
    second = locator.locate()

    assert first == second
    assert second.root == root


def test_reset_forces_rescan(tmp_path: Path) -> None:
    root = make_profile(tmp_path / "profile")
    locator = ProfileLocator([root])
    locator.locate()
    shutil.rmtree(root)

    locator.reset()

    with pytest.raises(ProfileNotFoundError):
        locator.locate()


def test_explicit_profile_dir_replaces_candidates(tmp_path: Path) -> None:
    default = make_profile(tmp_path / "default")
    explicit = make_profile(tmp_path / "explicit")

    locator = ProfileLocator([default], profile_dir=explicit)

    assert locator.candidates == (explicit,)
    assert locator.locate().root == explicit


def test_extra_dirs_are_searched_first(tmp_path: Path) -> None:
    default = make_profile(tmp_path / "default")
    extra = make_profile(tmp_path / "extra")

    locator = ProfileLocator([default], extra_dirs=[extra])

    assert locator.locate().root == extra


def test_from_settings(tmp_path: Path) -> None:
    explicit = make_profile(tmp_path / "explicit")
    extra = tmp_path / "extra"
    settings = Settings(profile_dir=explicit, extra_profile_dirs=(extra,))

    locator = ProfileLocator.from_settings(settings)

    assert locator.candidates == (extra, explicit)


def test_default_candidates_per_platform(tmp_path: Path) -> None:
    linux = default_candidates("linux", tmp_path)
    assert linux[0] == tmp_path / ".config/google-chrome/Default"
    assert tmp_path / "snap/chromium/common/chromium/Default" in linux

    mac = default_candidates("darwin", tmp_path)
    assert mac[0] == tmp_path / "Library/Application Support/Google/Chrome/Default"

    windows = default_candidates("win32", tmp_path)
    assert tmp_path / "AppData/Local/Chromium/User Data/Default" in windows

    assert default_candidates("sunos5", tmp_path) == []


def test_linux_variants_share_candidates(tmp_path: Path) -> None:
    assert default_candidates("linux2", tmp_path) == default_candidates("linux", tmp_path)
