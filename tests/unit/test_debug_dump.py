from unittest.mock import patch

from src.utils.debug_dump import write_debug_text


def test_write_debug_text_writes_file(tmp_path):
    path = write_debug_text("mala-1.txt", "Corte Dama\n$ 15000", directory=str(tmp_path / "dbg"))

    assert path == str(tmp_path / "dbg" / "mala-1.txt")
    assert (tmp_path / "dbg" / "mala-1.txt").read_text(encoding="utf-8") == "Corte Dama\n$ 15000"


def test_write_debug_text_swallows_errors(tmp_path):
    with patch("pathlib.Path.write_text", side_effect=PermissionError("read-only")):
        path = write_debug_text("mala-2.txt", "text", directory=str(tmp_path))

    assert path == ""
