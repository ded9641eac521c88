import io

import pytest

from ascii_converter.cli import batch_convert, interactive
from ascii_converter.services.ascii_art_service import AsciiArtService
from ascii_converter.services.renderers import DEFAULT_RAMP, BasicAsciiRenderer


def scripted(*answers):
    """input() replacement that replays answers, then signals end of input."""
    queue = list(answers)
    prompts = []

    def _input(prompt):
        prompts.append(prompt)
        if not queue:
            raise EOFError
        return queue.pop(0)

    _input.prompts = prompts
    return _input


def run_session(*answers, **kwargs):
    out, err = io.StringIO(), io.StringIO()
    input_fn = scripted(*answers)
    count = interactive.run(
        input_fn, out, err,
        ascii_art_service=AsciiArtService(BasicAsciiRenderer(ramp=DEFAULT_RAMP, cell_aspect=2)),
        quit_sentinel="q",
        **kwargs,
    )
    return count, out.getvalue(), err.getvalue(), input_fn.prompts


def test_quit_immediately():
    count, out, err, prompts = run_session("q")

    assert count == 0
    assert out == ""
    assert prompts == ["Enter the path to the image file (or 'q' to quit): "]


def test_end_of_input_terminates():
    count, _, _, _ = run_session()
    assert count == 0


def test_failed_load_restarts_loop(tmp_path):
    count, out, err, prompts = run_session(str(tmp_path / "missing.png"), "q")

    assert count == 0
    assert "Failed to load image!" in err
    # width is never asked for
    assert interactive.WIDTH_PROMPT not in prompts


def test_undecodable_image_restarts_loop(oversized_png):
    count, out, err, _ = run_session(str(oversized_png), "q")

    assert count == 0
    assert "Failed to load image!" in err
    assert out == ""


def test_renders_with_header(write_image):
    path = write_image("black.png", size=(10, 10), color=(0, 0, 0))

    count, out, err, _ = run_session(str(path), "10", "q")

    assert count == 1
    assert err == ""
    lines = out.splitlines()
    assert lines[0] == "Converting grayscale image to ASCII art (width = 10):"
    assert lines[1:6] == ["@" * 10] * 5
    assert lines[6] == ""


@pytest.mark.parametrize("answer", ["abc", "0", "-4"])
def test_invalid_width_is_reported(write_image, answer):
    path = write_image("black.png", size=(10, 10))

    count, out, err, _ = run_session(str(path), answer, "q")

    assert count == 0
    assert "Invalid width" in err
    assert out == ""


def test_empty_width_uses_default(write_image):
    path = write_image("black.png", size=(10, 10))

    count, out, _, _ = run_session(str(path), "", "q", default_width=4)

    assert count == 1
    assert "(width = 4)" in out
    assert "@@@@\n@@@@\n" in out


@pytest.mark.parametrize("default_width", [0, -3, "abc"])
def test_invalid_default_width_is_reported(write_image, default_width):
    path = write_image("black.png", size=(10, 10))

    count, out, err, _ = run_session(str(path), "", "q", default_width=default_width)

    assert count == 0
    assert "Invalid width" in err
    assert out == ""


def test_default_width_from_environment(monkeypatch, write_image):
    monkeypatch.setenv("DEFAULT_ASCII_WIDTH", "0")
    path = write_image("black.png", size=(10, 10))

    count, _, err, _ = run_session(str(path), "", "q")

    assert count == 0
    assert "Invalid width '0'" in err


def test_zero_height_warns(write_image):
    path = write_image("strip.png", size=(20, 1))

    count, out, err, _ = run_session(str(path), "20", "q")

    assert count == 1
    assert "too short" in err
    assert out == "Converting grayscale image to ASCII art (width = 20):\n\n"


def test_batch_convert_folder(tmp_path, write_image):
    write_image("a.png", size=(8, 8), color=(0, 0, 0))
    write_image("b.png", size=(8, 8), color=(255, 255, 255))
    (tmp_path / "readme.txt").write_text("not an image")
    out_dir = tmp_path / "ascii"

    written = batch_convert.convert_folder(tmp_path, 4, out_dir=out_dir, mode="basic")

    assert sorted(p.name for p in written) == ["a.txt", "b.txt"]
    assert (out_dir / "a.txt").read_text(encoding="utf-8") == "@@@@\n@@@@\n"
    assert (out_dir / "b.txt").read_text(encoding="utf-8") == "    \n    \n"


def test_batch_main_missing_folder(tmp_path, capsys):
    assert batch_convert.main([str(tmp_path / "nope")]) == 1
    assert "not a directory" in capsys.readouterr().err


def test_batch_main_rejects_bad_width(tmp_path):
    with pytest.raises(SystemExit):
        batch_convert.main([str(tmp_path), "--width", "0"])


def test_batch_same_stem_gets_distinct_files(tmp_path, write_image):
    write_image("a.png", size=(8, 8), color=(0, 0, 0))
    write_image("a.bmp", size=(8, 8), color=(255, 255, 255))
    out_dir = tmp_path / "ascii"

    written = batch_convert.convert_folder(tmp_path, 4, out_dir=out_dir, mode="basic")

    # sorted scan: a.bmp is converted first and keeps the plain name
    assert [p.name for p in written] == ["a.txt", "a_png.txt"]
    assert (out_dir / "a.txt").read_text(encoding="utf-8") == "    \n    \n"
    assert (out_dir / "a_png.txt").read_text(encoding="utf-8") == "@@@@\n@@@@\n"


def test_batch_recursive_out_dir_does_not_overwrite(tmp_path):
    from PIL import Image as PILImage

    src = tmp_path / "src"
    for sub in ("one", "two", "three"):
        (src / sub).mkdir(parents=True)
        PILImage.new("RGB", (8, 8)).save(src / sub / "x.png")
    out_dir = tmp_path / "ascii"

    written = batch_convert.convert_folder(src, 4, out_dir=out_dir, recursive=True, mode="basic")

    assert len(written) == 3
    assert len(set(written)) == 3
    assert sorted(p.name for p in out_dir.iterdir()) == ["x.txt", "x_png.txt", "x_png_2.txt"]
