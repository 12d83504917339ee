import yaml

from bitmap_font_builder.metrics import compute_line_metrics, derive_glyph_metrics
from bitmap_font_builder.packer import Rect
from bitmap_font_builder.unity import (
    asset_guid,
    render_font_settings,
    render_material,
    render_texture_meta,
)


def _body(document):
    header, _, body = document.partition("\n--- ")
    assert header == "%YAML 1.1\n%TAG !u! tag:unity3d.com,2011:"
    tag, _, rest = body.partition("\n")
    return tag, yaml.safe_load(rest)


def test_font_settings_records_glyph_metrics():
    rects = [Rect(0, 0, 8, 20), Rect(8, 0, 6, 10)]
    line = compute_line_metrics(rects)
    glyphs = derive_glyph_metrics(rects, "AB", (16, 32), line)

    tag, body = _body(render_font_settings("digits", glyphs, line, "abc123"))
    assert tag == "!u!128 &12800000"
    font = body["Font"]
    assert font["m_Name"] == "digits"
    assert font["m_LineSpacing"] == 20
    assert font["m_DefaultMaterial"] == {"fileID": 2100000, "guid": "abc123", "type": 2}

    first, second = font["m_CharacterRects"]
    assert first["index"] == 65
    assert first["uv"]["x"] == 0 and first["uv"]["width"] == 0.5 and first["uv"]["height"] == 0.625
    assert first["vert"] == {"serializedVersion": 2, "x": 0, "y": 10, "width": 8, "height": -20}
    assert first["advance"] == 8
    assert second["index"] == 66
    assert second["uv"]["x"] == 0.5
    assert second["vert"]["y"] == 5 and second["vert"]["height"] == -10


def test_material_references_atlas_texture():
    tag, body = _body(render_material("digits", "feed"))
    assert tag == "!u!21 &2100000"
    material = body["Material"]
    assert material["m_Name"] == "digits"
    main_tex = material["m_SavedProperties"]["m_TexEnvs"][0]["_MainTex"]
    assert main_tex["m_Texture"] == {"fileID": 2800000, "guid": "feed", "type": 3}


def test_texture_meta_pins_guid_and_import_settings():
    meta = yaml.safe_load(render_texture_meta("feed"))
    assert meta["guid"] == "feed"
    assert meta["TextureImporter"]["isReadable"] == 1
    assert meta["TextureImporter"]["textureCompression"] == 0


def test_guid_depends_on_file_name_only(tmp_path):
    assert asset_guid(tmp_path / "a" / "font.png") == asset_guid(tmp_path / "b" / "font.png")
    assert asset_guid(tmp_path / "font.png") != asset_guid(tmp_path / "font.mat")
    assert len(asset_guid(tmp_path / "font.png")) == 32
