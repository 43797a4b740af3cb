import os

import pytest

from edwood.complete import Completion, complete


@pytest.fixture
def sample_dir(tmp_path):
    root = tmp_path / "testdata"
    root.mkdir()
    (root / "aaa.txt").write_text("")
    (root / "bbb.dir").mkdir()
    for sub, names in {
        "ccc": ["x", "y", "z"],
        "ddd": ["xxx1", "xxx2", "xxx3"],
        "eee": ["xxx"],
    }.items():
        d = root / sub
        d.mkdir()
        for name in names:
            (d / name).write_text("")
    return root


SEP = os.sep


@pytest.mark.parametrize(
    "subdir, prefix, expected",
    [
        ("", "aaa", Completion(True, True, ".txt ", 1, ["aaa.txt"])),
        ("", "aaa.txt", Completion(True, True, " ", 1, ["aaa.txt"])),
        ("", "bbb", Completion(True, True, ".dir" + SEP, 1, ["bbb.dir" + SEP])),
        ("ccc", "a", Completion(False, False, "", 0, ["x", "y", "z"])),
        ("ccc", "", Completion(False, False, "", 3, ["x", "y", "z"])),
        ("ddd", "x", Completion(True, False, "xx", 3, ["xxx1", "xxx2", "xxx3"])),
        ("eee", "", Completion(True, True, "xxx ", 1, ["xxx"])),
    ],
)
def test_complete_cases(sample_dir, subdir, prefix, expected):
    directory = sample_dir / subdir if subdir else sample_dir
    assert complete(str(directory), prefix) == expected


def test_no_match_lists_everything_with_directory_marks(sample_dir):
    result = complete(str(sample_dir), "zzz")
    assert result.nmatch == 0
    assert result.filenames == [
        "aaa.txt",
        "bbb.dir" + SEP,
        "ccc" + SEP,
        "ddd" + SEP,
        "eee" + SEP,
    ]


def test_separator_in_prefix_is_rejected(sample_dir):
    with pytest.raises(ValueError):
        complete(str(sample_dir), "ccc" + SEP + "x")


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        complete(str(tmp_path / "nothere"), "a")