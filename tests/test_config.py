"""Parsing of command-line values and YAML batch files."""

from pathlib import Path

import pytest

from mandelgray.config import (
    DEFAULT_RENDER_CONFIG,
    RenderConfig,
    UsageError,
    build_render_config,
    default_render_config,
    load_batch_configs,
    parse_complex,
    parse_image_size,
    parse_pair,
)

TEST_BATCH = Path(__file__).parent / "test_renders.yaml"


@pytest.mark.parametrize(
    "text,separator,convert,expected",
    [
        ("", ",", int, None),
        ("10,", ",", int, None),
        (",10", ",", int, None),
        ("10,20", ",", int, (10, 20)),
        ("10,20xy", ",", int, None),
        ("0.5x", "x", float, None),
        ("0.5x1.5", "x", float, (0.5, 1.5)),
        (" 3 x 4 ", "x", int, (3, 4)),
    ],
)
def test_parse_pair(text, separator, convert, expected):
    assert parse_pair(text, separator, convert) == expected


def test_parse_complex():
    assert parse_complex("1.25,-0.0625") == complex(1.25, -0.0625)
    assert parse_complex(" -1.20,0.35") == complex(-1.20, 0.35)
    assert parse_complex(",-0.0625") is None
    assert parse_complex("nan,0") is None
    assert parse_complex("1,inf") is None


@pytest.mark.parametrize("value", ["320x200", "320X200"])
def test_parse_image_size(value):
    assert parse_image_size(value) == (320, 200)


@pytest.mark.parametrize("value", ["320", "320x", "x200", "0x200", "320x-1", "3.5x2", "axb"])
def test_parse_image_size_rejects(value):
    with pytest.raises(UsageError):
        parse_image_size(value)


def test_build_render_config():
    config = build_render_config("320x200", "-1.20,0.35", "-1.00,0.20", limit="100", workers="4", output="out.png")
    assert config == RenderConfig(
        width=320,
        height=200,
        upper_left=complex(-1.20, 0.35),
        lower_right=complex(-1.00, 0.20),
        limit=100,
        workers=4,
        output="out.png",
    )
    assert config.bounds == (320, 200)
    assert config.n_workers == 4


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"pixels": "320y200"}, "image dimensions"),
        ({"upper_left": "-1.2;0.35"}, "upper left"),
        ({"lower_right": "abc"}, "lower right"),
        ({"limit": "0"}, "iteration limit"),
        ({"limit": "256"}, "iteration limit"),
        ({"workers": "0"}, "worker count"),
        ({"workers": "many"}, "worker count"),
    ],
)
def test_build_render_config_errors(kwargs, message):
    args = {"pixels": "320x200", "upper_left": "-1.20,0.35", "lower_right": "-1.00,0.20", **kwargs}
    limit = args.pop("limit", 255)
    workers = args.pop("workers", None)
    with pytest.raises(UsageError, match=message):
        build_render_config(**args, limit=limit, workers=workers)


def test_default_render_config_overrides():
    config = default_render_config(image_size="64x48", limit=50)
    assert (config.width, config.height, config.limit) == (64, 48, 50)
    assert config.upper_left == DEFAULT_RENDER_CONFIG.upper_left


def test_run_name_and_dict():
    config = RenderConfig(width=10, height=20, upper_left=complex(-2, 1), lower_right=complex(1, -1), limit=99)
    assert config.run_name == "10x20_-2,1_1,-1_l99"
    assert config.to_dict()["upper_left"] == "-2,1"


def test_load_batch_configs():
    configs = load_batch_configs(TEST_BATCH)

    assert [cfg.output for cfg in configs] == ["scenario.png", "symmetric.png", "rotated.png"]
    scenario, symmetric, rotated = configs
    assert scenario.bounds == (320, 200)
    assert scenario.upper_left == complex(-1.20, 0.35)
    assert scenario.lower_right == complex(-1.00, 0.20)
    assert scenario.limit == 255
    assert symmetric.bounds == (64, 48)
    assert symmetric.limit == 80
    assert symmetric.workers == 3
    assert rotated.bounds == (30, 40)
    assert rotated.upper_left == complex(0.5, -1.0)


@pytest.mark.parametrize(
    "text,message",
    [
        ("renders:\n  - image_size: 10x10\n", "output"),
        ("renders:\n  - output: a.png\n", "image_size"),
        ("renders:\n  - output: a.png\n    image_size: \"0x10\"\n", "positive"),
        ("renders:\n  - output: a.png\n    image_size: 0x10\n", "quote it"),
        ("defaults: [1]\nrenders:\n  - output: a.png\n    image_size: 4x4\n", "'defaults' must be a mapping"),
        ("renders:\n  - output: a.png\n    image_size: 10x10\n    upper_left: [1]\n", "upper left"),
        ("renders:\n  - output: a.png\n    image_size: 10x10\n    colour: red\n", "unknown keys"),
        ("renders:\n  - output: a.png\n    image_size: 10x10\n    limit: 1000\n", "iteration limit"),
        ("renders: 3\n", "must be a list"),
        ("- just\n- a list\n", "mapping"),
        ("renders: [\n", "invalid YAML"),
    ],
)
def test_load_batch_configs_errors(tmp_path, text, message):
    path = tmp_path / "batch.yaml"
    path.write_text(text)
    with pytest.raises(UsageError, match=message):
        load_batch_configs(path)


def test_load_batch_configs_empty(tmp_path):
    path = tmp_path / "batch.yaml"
    path.write_text("")
    assert load_batch_configs(path) == []
