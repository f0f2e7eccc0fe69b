import pytest

from figma_assets.exceptions import DirectoryError
from figma_assets.utils.path import (
    create_dir,
    find_collisions,
    sanitize_filename,
    scan_directory,
)

UNSAFE = '/\\:*?"<>|'


@pytest.mark.parametrize(
    "name, expected",
    [
        ("A/B", "A_B"),
        ('a\\b:c*d?e"f<g>h|i', "a_b_c_d_e_f_g_h_i"),
        ("Icon / Close", "Icon _ Close"),
        ("", ""),
        ("////", "____"),
    ],
)
def test_sanitize_replaces_unsafe_characters(name, expected):
    assert sanitize_filename(name) == expected


@pytest.mark.parametrize(
    "name", ["plain", "Ünïcødé 图标 🎨", "dots.and-dashes_ok", "  spaced  "]
)
def test_sanitize_leaves_safe_names_unchanged(name):
    assert sanitize_filename(name) == name


@pytest.mark.parametrize("name", ["A/B", 'x<y>z', "C:\\Users\\me", "?*?", "ok"])
def test_sanitize_is_idempotent_and_total(name):
    once = sanitize_filename(name)
    assert sanitize_filename(once) == once
    assert not any(ch in once for ch in UNSAFE)


def test_scan_directory_is_case_sensitive_and_non_recursive(tmp_path):
    (tmp_path / "icon.png").write_bytes(b"1")
    (tmp_path / "logo.png").write_bytes(b"2")
    (tmp_path / "readme.txt").write_text("hi")
    (tmp_path / "UPPER.PNG").write_bytes(b"3")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "deep.png").write_bytes(b"4")
    (tmp_path / "folder.png").mkdir()

    found = scan_directory(tmp_path, "png")

    assert [p.name for p in found] == ["icon.png", "logo.png"]


def test_scan_directory_missing_raises_directory_error(tmp_path):
    with pytest.raises(DirectoryError):
        scan_directory(tmp_path / "missing", "png")


def test_create_dir_is_idempotent(tmp_path):
    target = tmp_path / "a" / "b"
    create_dir(target)
    create_dir(target)
    assert target.is_dir()


def test_create_dir_over_a_file_raises_directory_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("x")
    with pytest.raises(DirectoryError):
        create_dir(blocker / "child")


def test_find_collisions_reports_only_shared_targets(tmp_path):
    pairs = [
        (tmp_path / "A_B.png", "A/B"),
        (tmp_path / "A_B.png", "A:B"),
        (tmp_path / "C.png", "C"),
    ]
    assert find_collisions(pairs) == {tmp_path / "A_B.png": ["A/B", "A:B"]}
