import os

import pytest

from auxiliary import format_bytes, format_path_for_display, printable_path


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, "0.00 B"),
        (1023, "1023.00 B"),
        (1536, "1.50 KB"),
        (1024**2 * 5, "5.00 MB"),
        (1048575, "1.00 MB"),
        (1024**3 - 1, "1.00 GB"),
        (1073741824, "1.00 GB"),
        (1024**4, "1.00 TB"),
        (1024**5 * 3, "3072.00 TB"),
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


def test_format_path_for_display_replaces_home_prefix():
    assert format_path_for_display("/home/ana/code/.venv", "/home/ana") == "~/code/.venv"
    assert format_path_for_display("/home/ana", "/home/ana") == "~"


def test_format_path_for_display_ignores_partial_matches():
    assert format_path_for_display("/home/anabel/.venv", "/home/ana") == "/home/anabel/.venv"
    assert format_path_for_display("/srv/home/ana/x", "/home/ana") == "/srv/home/ana/x"


def test_printable_path_escapes_undecodable_bytes():
    path = os.fsdecode(b"/srv/\xffenv")

    assert printable_path(path) == "/srv/\\xffenv"
    assert format_path_for_display(path, "/home/ana") == "/srv/\\xffenv"
    assert printable_path("/srv/café") == "/srv/café"
