import json

import pytest

from ..config import PanoConfig
from ..constants import DEFAULT_ZOOM, RATE_INTERVAL, TILE_ENDPOINT, TRIM_THRESHOLD
from ..errors import NetworkError
from ..my_utils import format_size, open_dataset, parse_args, save_img, timer


@pytest.mark.parametrize("num_bytes, expected", [
    (0, "0.00 B"),
    (512, "512.00 B"),
    (2048, "2.00 KB"),
    (3 * 1024 ** 2, "3.00 MB"),
])
def test_format_size(num_bytes, expected):
    assert format_size(num_bytes) == expected


def test_save_img(tmp_path):
    size = save_img(b"\xff\xd8jpeg", str(tmp_path), "pano", 3)

    out = tmp_path / "panos_z3" / "pano.jpg"
    assert out.read_bytes() == b"\xff\xd8jpeg"
    assert size == "6.00 B"


def test_open_dataset(tmp_path):
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(["a", "b"]))
    assert open_dataset(str(path)) == ["a", "b"]


def test_open_dataset_rejects_non_list(tmp_path):
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps({"panoids": ["a"]}))
    with pytest.raises(ValueError):
        open_dataset(str(path))


def test_timer():
    with timer() as t:
        pass
    assert t.time_elapsed.startswith("0h 0m ")


def test_parse_args_defaults():
    args = parse_args(["--panoid", "ABC"])
    config = PanoConfig.from_args(args)

    assert args.panoid == ["ABC"]
    assert args.deadline is None
    assert config == PanoConfig()
    assert config.zoom == DEFAULT_ZOOM
    assert config.interval == RATE_INTERVAL
    assert config.trim_threshold == TRIM_THRESHOLD
    assert config.endpoint == TILE_ENDPOINT


def test_parse_args_overrides():
    args = parse_args([
        "--dataset", "ids.json", "--zoom", "2", "--tile-size", "256",
        "--trim-threshold", "10", "--interval", "0.5", "--burst", "2",
        "--deadline", "60", "--quality", "80",
    ])
    config = PanoConfig.from_args(args)

    assert args.dataset == "ids.json"
    assert args.deadline == 60
    assert config == PanoConfig(zoom=2, tile_size=256, trim_threshold=10, interval=0.5, burst=2, quality=80)


def test_parse_args_requires_a_source():
    with pytest.raises(SystemExit):
        parse_args([])


@pytest.mark.parametrize("kwargs", [
    {"zoom": 0},
    {"tile_size": 0},
    {"trim_threshold": -1},
    {"interval": 0},
    {"burst": 0},
    {"quality": 101},
])
def test_config_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        PanoConfig(**kwargs)


def test_error_str_includes_context():
    error = NetworkError("HTTP 404", status=404).add_context(stage="fetching", tile=(2, 1))
    assert str(error) == "[fetching] tile (2,1) HTTP 404"

    # context already present is kept
    error.add_context(stage="composing", tile=(0, 0))
    assert error.stage == "fetching"
    assert error.tile == (2, 1)
