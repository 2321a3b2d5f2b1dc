import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Add repo root to path
ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from scripts.make_image import main


def test_cli_writes_png(tmp_path, capsys):
    out = tmp_path / "almond-bread.png"
    preview = tmp_path / "preview.png"
    rc = main([
        "--config", str(ROOT / "configs" / "default.yaml"),
        "--size", "16",
        "--max_iter", "25",
        "--method", "sequential",
        "--outfile", str(out),
        "--preview", str(preview),
    ])

    assert rc == 0
    assert out.exists() and preview.exists()
    with Image.open(out) as im:
        assert im.size == (16, 16)
        # top-left pixel is -2-2i, which escapes after one step: b = floor(255/25) = 10
        assert tuple(np.asarray(im)[0, 0]) == (10, 100, 235)

    printed = capsys.readouterr().out
    assert "[run]" in printed
    assert "Time:" in printed


def test_cli_negative_center(tmp_path, capsys):
    """Negative centers work both as --center=... and as separate float options."""
    joined = tmp_path / "joined.png"
    split = tmp_path / "split.png"
    common = ["--radius", "0.01", "--size", "4", "--max_iter", "10"]

    assert main(["--center=-1-0.3j", *common, "--outfile", str(joined)]) == 0
    assert main(["--center_x", "-1", "--center_y", "-0.3", *common, "--outfile", str(split)]) == 0

    printed = capsys.readouterr().out
    assert printed.count("[run] center=(-1.0, -0.3)") == 2
    with Image.open(joined) as a, Image.open(split) as b:
        assert a.size == (4, 4)
        np.testing.assert_array_equal(np.asarray(a), np.asarray(b))


def test_cli_center_conflict(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["--center=0.5j", "--center_x", "1", "--outfile", str(tmp_path / "x.png")])
    assert exc.value.code == 2
