import json

import pytest

from bitmap_font_builder.cli import main


def test_filenames_command_prints_summary(glyph_dir, tmp_path, capsys):
    out = tmp_path / "out"
    main(["filenames", str(glyph_dir), "--output-dir", str(out), "--font-name", "pix"])
    summary = json.loads(capsys.readouterr().out)
    assert summary["font_name"] == "pix"
    assert summary["glyphs"] == 3
    assert summary["characters"] == "ABC"
    assert (out / "pix.fnt").is_file()
    assert (out / "pix.fontsettings").is_file()
    assert (out / "pix.mat").is_file()
    assert (out / "pix.png").is_file()


def test_manifest_command_face_and_size(manifest_dir, capsys):
    main(["manifest", str(manifest_dir), "--face", "Numbers", "--size", "11"])
    capsys.readouterr()
    content = (manifest_dir / "numbers.fnt").read_text(encoding="utf-8")
    assert content.startswith('info face="Numbers" size=11 ')
    assert "common lineHeight=11 " in content


def test_manifest_mismatch_exits_with_error(manifest_dir, caplog):
    (manifest_dir / "chars.txt").write_text("A", encoding="utf-8")
    with pytest.raises(SystemExit) as info:
        main(["manifest", str(manifest_dir)])
    assert info.value.code == 1
    assert "character count (1)" in caplog.text
    assert not (manifest_dir / "numbers.fnt").exists()


def test_not_a_directory_exits_with_error(tmp_path):
    with pytest.raises(SystemExit) as info:
        main(["filenames", str(tmp_path / "nope")])
    assert info.value.code == 1


def test_request_commands(glyph_dir, tmp_path, capsys):
    request = tmp_path / "font.yaml"
    main(["init-request", str(glyph_dir), str(request), "--output-dir", str(tmp_path / "out")])
    assert json.loads(capsys.readouterr().out)["characters"] == "ABC"

    # four PNGs were found, only three have single-character names
    text = request.read_text(encoding="utf-8").replace("characters: ABC", "characters: ABCD")
    request.write_text(text, encoding="utf-8")

    main(["build-request", str(request)])
    summary = json.loads(capsys.readouterr().out)
    assert summary["glyphs"] == 4
    assert summary["characters"] == "ABCD"
