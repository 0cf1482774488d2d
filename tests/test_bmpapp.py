import numpy as np
import pytest

import bmpapp
from bitmap import Bitmap


def scripted(*answers):
    """Stand-in for input() that replays answers and records prompts."""
    replies = iter(answers)
    prompts = []

    def ask(prompt):
        prompts.append(prompt)
        return next(replies)

    ask.prompts = prompts
    return ask


@pytest.fixture
def source(tmp_path, make_bitmap):
    path = tmp_path / "in.bmp"
    make_bitmap(5, 3, seed=4).write(path)
    return path


def test_session_applies_commands(tmp_path, source, capsys):
    out = tmp_path / "out.bmp"
    ask = scripted(str(source), "2", "i", "H", "x", "q", str(out))

    assert bmpapp.session(ask) == 0

    expected = Bitmap.read(source).invert().horizontal_mirror()
    np.testing.assert_array_equal(Bitmap.read(out).colors, expected.colors)

    printed = capsys.readouterr().out
    assert printed.count("seconds to execute") == 2
    assert "Command is not valid; please try again." in printed
    assert ask.prompts[-1] == "What do you want to name your new image file: "


def test_thread_prompt_repeats_until_valid(tmp_path, source):
    out = tmp_path / "out.bmp"
    ask = scripted("abc", "0", "3", "q", str(out))

    assert bmpapp.session(ask, [str(source)]) == 0
    thread_prompts = [p for p in ask.prompts if p.startswith("How many threads")]
    assert len(thread_prompts) == 3


def test_threads_from_arguments(tmp_path, source):
    out = tmp_path / "out.bmp"
    ask = scripted("d", "q", str(out))

    assert bmpapp.session(ask, [str(source), "4"]) == 0
    assert (Bitmap.read(out).width, Bitmap.read(out).height) == (10, 6)


def test_info_command(tmp_path, source, capsys):
    ask = scripted("p", "q", str(tmp_path / "out.bmp"))
    bmpapp.session(ask, [str(source), "1"])
    printed = capsys.readouterr().out
    assert "BMP File Analysis: in.bmp" in printed
    assert "5 × 3 pixels" in printed


def test_missing_file(tmp_path, capsys):
    missing = tmp_path / "missing.bmp"
    assert bmpapp.session(scripted(), [str(missing)]) == 1
    assert f'The file: "{missing}" was not found.' in capsys.readouterr().out


def test_not_a_bitmap(tmp_path, capsys):
    path = tmp_path / "fake.bmp"
    path.write_bytes(b"GIF89a" + bytes(64))
    assert bmpapp.session(scripted(), [str(path)]) == 1
    assert "is not a valid bitmap" in capsys.readouterr().out


def test_preview_of_empty_image(capsys):
    bitmap = Bitmap(1, 1).shrink()
    assert bmpapp.run_command(bitmap, "v")
    assert "Nothing to preview" in capsys.readouterr().out


def test_run_command_unknown():
    assert not bmpapp.run_command(Bitmap(1, 1), "z")


def test_main_usage(capsys):
    assert bmpapp.main(["a.bmp", "2", "extra"]) == 2
    assert "Usage" in capsys.readouterr().out
