import logging

import numpy as np
import pytest

from scalemask.cli import main, run_overlay_pipeline
from scalemask.cli.run_overlay import build_parser, load_user_config_dict
from scalemask.errors import MissingArguments, MissingReferenceImage

from tests.helpers.fake_images import make_legend, read_rgba, write_rgb

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def restore_root_logging():
    """setup_logging() replaces root handlers; put the originals back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def workspace(temp_dir):
    """Legend, user config and two targets drawn from legend colors."""
    legend = make_legend(rows=10, width=6)
    write_rgb(temp_dir / "legend.png", legend)

    config_file = temp_dir / "user_config.py"
    config_file.write_text(
        "CONFIG = {\n"
        "    'SCAN_ROWS': (0, 9),\n"
        "    'SAMPLE_COLUMNS': (2, 4),\n"
        "    'ANCHORS': {'rows': [0, 9], 'values': [50.0, 0.0]},\n"
        "    'IMAGE_WORKERS': 2,\n"
        "    'ROW_WORKERS': 2,\n"
        "}\n"
    )

    # row 0 of the legend is worth 50, row 9 is worth 0
    first = np.array([[legend[0, 0], legend[9, 0]]], dtype=np.uint8)
    second = np.array([[legend[0, 0]], [legend[0, 0]]], dtype=np.uint8)
    targets = [
        write_rgb(temp_dir / "first.png", first),
        write_rgb(temp_dir / "second.png", second),
    ]
    return temp_dir, config_file, targets


def test_load_user_config_dict(workspace):
    _, config_file, _ = workspace
    assert load_user_config_dict(str(config_file))["ROW_WORKERS"] == 2


def test_load_user_config_without_config_dict(temp_dir):
    path = temp_dir / "empty_config.py"
    path.write_text("X = 1\n")
    with pytest.raises(ValueError, match="No CONFIG dict"):
        load_user_config_dict(str(path))


def test_load_user_config_missing_file(temp_dir):
    with pytest.raises(FileNotFoundError):
        load_user_config_dict(str(temp_dir / "absent.py"))


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.images == []
    assert args.reference is None
    assert args.pause is False


def test_pipeline_end_to_end(workspace):
    temp_dir, config_file, targets = workspace

    results = run_overlay_pipeline(
        [str(p) for p in targets],
        user_config_path=str(config_file),
        cli_args={"reference_image": str(temp_dir / "legend.png")},
    )

    assert all(r is not None for r in results.values())
    first = read_rgba(temp_dir / "first_alfa.png")
    np.testing.assert_array_equal(first[0, 0], [0, 0, 255, 255])
    np.testing.assert_array_equal(first[0, 1], [0, 0, 255, 0])
    second = read_rgba(temp_dir / "second_alfa.png")
    assert second.shape == (2, 1, 4)
    assert (second[..., 3] == 255).all()


def test_pipeline_missing_reference(temp_dir):
    with pytest.raises(MissingReferenceImage, match="does not exist"):
        run_overlay_pipeline(["a.png"], cli_args={"reference_image": str(temp_dir / "nope.png")})


def test_pipeline_missing_images(workspace):
    temp_dir, config_file, _ = workspace
    with pytest.raises(MissingArguments):
        run_overlay_pipeline(
            [], str(config_file), {"reference_image": str(temp_dir / "legend.png")}
        )


def test_main_success(workspace):
    temp_dir, config_file, targets = workspace
    argv = ["-c", str(config_file), "--reference", str(temp_dir / "legend.png")]
    argv += [str(p) for p in targets]

    assert main(argv) == 0
    assert (temp_dir / "first_alfa.png").exists()
    assert (temp_dir / "second_alfa.png").exists()


def test_main_exits_zero_when_an_image_fails(workspace):
    temp_dir, config_file, targets = workspace
    corrupt = temp_dir / "corrupt.png"
    corrupt.write_bytes(b"nope")
    argv = ["-c", str(config_file), "--reference", str(temp_dir / "legend.png"),
            str(corrupt), str(targets[0])]

    assert main(argv) == 0
    assert (temp_dir / "first_alfa.png").exists()


def test_main_missing_reference(temp_dir, capsys):
    assert main(["--reference", str(temp_dir / "nope.png"), "a.png"]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_main_without_images(workspace, capsys):
    temp_dir, _, _ = workspace
    assert main(["--reference", str(temp_dir / "legend.png")]) == 1
    assert "at least one image" in capsys.readouterr().err


def test_main_invalid_workers(capsys):
    assert main(["--row-workers", "0", "a.png"]) == 1
    assert "Configuration error" in capsys.readouterr().err


def test_main_calibration_failure(temp_dir):
    # default sample columns 650..658 do not exist on a 6-pixel-wide legend
    legend = write_rgb(temp_dir / "legend.png", make_legend())
    assert main(["--reference", str(legend), "a.png"]) == 1


def test_main_writes_log_file(workspace):
    temp_dir, config_file, targets = workspace
    log_file = temp_dir / "logs" / "run.log"
    argv = ["-c", str(config_file), "--reference", str(temp_dir / "legend.png"),
            "--log-file", str(log_file), str(targets[0])]

    assert main(argv) == 0
    assert "Batch finished" in log_file.read_text()


def test_main_pause_waits_for_enter(temp_dir, monkeypatch):
    prompts = []
    monkeypatch.setattr("builtins.input", lambda prompt="": prompts.append(prompt) or "")

    assert main(["--reference", str(temp_dir / "nope.png"), "--pause", "a.png"]) == 1
    assert prompts == ["Press Enter to continue..."]


@pytest.mark.parametrize("source", [
    "CONFIG = {'ROW_WORKERS': 2\n",
    "CONFIG = {'ROW_WORKERS': undefined_name}\n",
    "import scalemask_no_such_module\n",
])
def test_load_user_config_broken_file(temp_dir, source):
    path = temp_dir / "broken_config.py"
    path.write_text(source)
    with pytest.raises(ValueError, match="Could not load config module"):
        load_user_config_dict(str(path))


def test_main_broken_config_file(temp_dir, capsys):
    path = temp_dir / "broken_config.py"
    path.write_text("CONFIG = {\n")
    assert main(["-c", str(path), "a.png"]) == 1
    assert "Configuration error" in capsys.readouterr().err
