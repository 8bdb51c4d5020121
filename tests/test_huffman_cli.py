import pytest

import huffman_cli


def _write(tmp_path, content, name="input.txt"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_short_input_echoes_strings(tmp_path, capsys):
    path = _write(tmp_path, "abracadabra\n")
    assert huffman_cli.main([str(path)]) == 0

    out = capsys.readouterr().out.splitlines()
    assert "Input string: abracadabra" in out
    assert "Encoded string: 01101110100010101101110" in out
    assert "Decoded string: abracadabra" in out
    assert "Decoded equals input: True" in out
    assert f"Compression ratio: {23 / 88}" in out


def test_long_input_skips_strings(tmp_path, capsys):
    path = _write(tmp_path, "the rain in spain\n" * 20)
    assert huffman_cli.main([str(path)]) == 0

    out = capsys.readouterr().out
    assert "Input string:" not in out
    assert "Decoded equals input: True" in out
    assert "Compression ratio: " in out


def test_input_is_trimmed_and_lines_joined(tmp_path):
    path = _write(tmp_path, "  one\ntwo  \n\n")
    assert huffman_cli.read_input(path) == "one\ntwo"


def test_missing_file_reports_and_fails(tmp_path, capsys):
    assert huffman_cli.main([str(tmp_path / "nope.txt")]) == 1
    assert capsys.readouterr().out.startswith("File not found: ")


def test_empty_file_fails(tmp_path, capsys):
    path = _write(tmp_path, "   \n")
    assert huffman_cli.main([str(path)]) == 1
    assert "Nothing to encode" in capsys.readouterr().err


def test_codes_flag_prints_table(tmp_path, capsys):
    path = _write(tmp_path, "aaaa")
    assert huffman_cli.main([str(path), "--codes"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert "Code table:" in out
    assert "  'a': 0" in out
    assert "Encoded string: 0000" in out


def test_format_code_table_orders_by_length():
    lines = huffman_cli.format_code_table({"b": "10", "a": "0", "c": "11"})
    assert lines == ["'a': 0", "'b': 10", "'c': 11"]


def test_filename_is_required():
    with pytest.raises(SystemExit):
        huffman_cli.main([])
