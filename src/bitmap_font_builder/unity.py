"""Unity font assets: .fontsettings, .mat and the atlas .meta importer file."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Any, Dict, List, Sequence

import yaml

from .metrics import GlyphMetrics, LineMetrics

UNITY_HEADER = "%YAML 1.1\n%TAG !u! tag:unity3d.com,2011:\n"

FONT_CLASS_ID = 128
MATERIAL_CLASS_ID = 21

TEXTURE_FILE_ID = 2800000
MATERIAL_FILE_ID = 2100000
FONT_FILE_ID = 12800000

# builtin "GUI/Text Shader"
TEXT_SHADER = {"fileID": 10101, "guid": "0000000000000000e000000000000000", "type": 0}


def asset_guid(path: Path) -> str:
    """Stable GUID for an artifact, derived from its file name."""
    return uuid.uuid5(uuid.NAMESPACE_URL, Path(path).name).hex


def _dump_document(class_id: int, file_id: int, body: Dict[str, Any]) -> str:
    text = yaml.safe_dump(body, sort_keys=False, default_flow_style=None, allow_unicode=True, width=4096)
    return f"{UNITY_HEADER}--- !u!{class_id} &{file_id}\n{text}"


def _object_header(name: str) -> Dict[str, Any]:
    return {
        "m_ObjectHideFlags": 0,
        "m_CorrespondingSourceObject": {"fileID": 0},
        "m_PrefabInstance": {"fileID": 0},
        "m_PrefabAsset": {"fileID": 0},
        "m_Name": name,
    }


def character_rect(glyph: GlyphMetrics) -> Dict[str, Any]:
    left, bottom = glyph.uv_bottom_left
    right, top = glyph.uv_top_right
    return {
        "serializedVersion": 2,
        "index": glyph.code_point,
        "uv": {"serializedVersion": 2, "x": left, "y": bottom, "width": right - left, "height": top - bottom},
        "vert": {
            "serializedVersion": 2,
            "x": glyph.min_x,
            "y": glyph.max_y,
            "width": glyph.max_x - glyph.min_x,
            "height": glyph.min_y - glyph.max_y,
        },
        "advance": glyph.advance,
        "flipped": 0,
    }


def render_font_settings(
    font_name: str,
    glyphs: Sequence[GlyphMetrics],
    line: LineMetrics,
    material_guid: str,
) -> str:
    rects: List[Dict[str, Any]] = [character_rect(glyph) for glyph in glyphs]
    body = {
        "Font": {
            **_object_header(font_name),
            "serializedVersion": 5,
            "m_LineSpacing": line.line_space,
            "m_DefaultMaterial": {"fileID": MATERIAL_FILE_ID, "guid": material_guid, "type": 2},
            "m_FontSize": 0,
            "m_Texture": {"fileID": 0},
            "m_AsciiStartOffset": 0,
            "m_Tracking": 1,
            "m_CharacterSpacing": 0,
            "m_CharacterPadding": 1,
            "m_ConvertCase": 0,
            "m_CharacterRects": rects,
            "m_KerningValues": [],
            "m_PixelScale": 0.1,
            "m_FontData": [],
            "m_Ascent": 0,
            "m_Descent": 0,
            "m_DefaultStyle": 0,
            "m_FontNames": [],
            "m_FallbackFonts": [],
            "m_FontRenderingMode": 0,
            "m_UseLegacyBoundsCalculation": 0,
            "m_ShouldRoundAdvanceValue": 1,
        }
    }
    return _dump_document(FONT_CLASS_ID, FONT_FILE_ID, body)


def render_material(font_name: str, texture_guid: str) -> str:
    body = {
        "Material": {
            "serializedVersion": 6,
            **_object_header(font_name),
            "m_Shader": TEXT_SHADER,
            "m_ShaderKeywords": "",
            "m_LightmapFlags": 4,
            "m_EnableInstancingVariants": 0,
            "m_DoubleSidedGI": 0,
            "m_CustomRenderQueue": -1,
            "stringTagMap": {},
            "disabledShaderPasses": [],
            "m_SavedProperties": {
                "serializedVersion": 3,
                "m_TexEnvs": [
                    {
                        "_MainTex": {
                            "m_Texture": {"fileID": TEXTURE_FILE_ID, "guid": texture_guid, "type": 3},
                            "m_Scale": {"x": 1, "y": 1},
                            "m_Offset": {"x": 0, "y": 0},
                        }
                    }
                ],
                "m_Floats": [],
                "m_Colors": [],
            },
        }
    }
    return _dump_document(MATERIAL_CLASS_ID, MATERIAL_FILE_ID, body)


def render_texture_meta(guid: str) -> str:
    """Importer settings for the atlas: uncompressed, readable, no mipmaps."""
    body = {
        "fileFormatVersion": 2,
        "guid": guid,
        "TextureImporter": {
            "serializedVersion": 11,
            "mipmaps": {"enableMipMap": 0},
            "isReadable": 1,
            "textureType": 0,
            "textureCompression": 0,
            "alphaIsTransparency": 1,
            "userData": "",
            "assetBundleName": "",
            "assetBundleVariant": "",
        },
    }
    return yaml.safe_dump(body, sort_keys=False, default_flow_style=False)


def write_font_settings(
    path: Path,
    font_name: str,
    glyphs: Sequence[GlyphMetrics],
    line: LineMetrics,
    material_guid: str,
) -> None:
    Path(path).write_text(render_font_settings(font_name, glyphs, line, material_guid), encoding="utf-8")


def write_material(path: Path, font_name: str, texture_guid: str) -> None:
    Path(path).write_text(render_material(font_name, texture_guid), encoding="utf-8")


def write_texture_meta(path: Path, guid: str) -> None:
    Path(path).write_text(render_texture_meta(guid), encoding="utf-8")
