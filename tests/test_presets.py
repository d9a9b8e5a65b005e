"""Tests for built-in looks and preset serialization."""

import json

import pytest

from lumagrade.config import GradingParams, PointColorQualifier, ToneMapping
from lumagrade.config.presets import (
    CYBERPUNK,
    NEUTRAL,
    NOIR,
    PRESETS,
    TEAL_ORANGE,
    VINTAGE_WARM,
    get_preset,
    load_params_json,
    params_from_dict,
    params_to_dict,
    save_params_json,
)


class TestBuiltInLooks:
    """Test the preset library."""

    def test_neutral_is_default(self):
        assert NEUTRAL == GradingParams()
        assert NEUTRAL.is_neutral()

    def test_looks_are_not_neutral(self):
        for name, params in PRESETS.items():
            if name != "neutral":
                assert not params.is_neutral(), name

    def test_looks_within_ranges(self):
        """Test every look is already inside the slider ranges."""
        for name, params in PRESETS.items():
            assert params.clamp() == params, name

    def test_look_contents(self):
        assert TEAL_ORANGE.tone_mapping is ToneMapping.FILMIC
        assert CYBERPUNK.tone_mapping is ToneMapping.AGX
        assert NOIR.saturation == 0.0
        assert VINTAGE_WARM.distortion == -5

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("noir", NOIR),
            ("NOIR", NOIR),
            ("Teal Orange", TEAL_ORANGE),
            ("teal-orange", TEAL_ORANGE),
            ("Teal & Orange", TEAL_ORANGE),
            ("vintage_warm", VINTAGE_WARM),
        ],
    )
    def test_get_preset_normalizes_name(self, name, expected):
        assert get_preset(name) is expected

    def test_get_preset_unknown(self):
        with pytest.raises(KeyError, match="Unknown preset"):
            get_preset("sepia")


class TestSerialization:
    """Test dict and JSON conversion."""

    def test_dict_is_json_compatible(self):
        d = params_to_dict(TEAL_ORANGE)
        text = json.dumps(d)

        assert d["tone_mapping"] == "filmic"
        assert d["color_grading"]["shadows"]["hue"] == 190
        assert json.loads(text) == d

    @pytest.mark.parametrize("params", list(PRESETS.values()))
    def test_dict_round_trip(self, params):
        assert params_from_dict(params_to_dict(params)) == params

    def test_round_trip_with_qualifiers(self):
        params = GradingParams(
            point_colors=(PointColorQualifier(src_hue=120, hue_shift=30, active=False),),
            lut_text="LUT_3D_SIZE 2",
            lut_intensity=0.5,
        )
        assert params_from_dict(params_to_dict(params)) == params

    def test_partial_dict_uses_defaults(self):
        """Test missing keys take their defaults."""
        params = params_from_dict({"exposure": 0.5, "vignette": {"amount": 0.3}})

        assert params.exposure == 0.5
        assert params.vignette.amount == 0.3
        assert params.vignette.feather == 0.5
        assert params.contrast == 1.0

    def test_unknown_keys_ignored(self):
        params = params_from_dict(
            {
                "exposure": 0.2,
                "legacy_field": 3,
                "grain": {"amount": 0.1, "seed": 42},
                "color_mixer": {"red": {"hue": 5}, "teal": {"hue": 9}},
            }
        )

        assert params.exposure == 0.2
        assert params.grain.amount == 0.1
        assert params.color_mixer.red.hue == 5

    def test_json_file_round_trip(self, tmp_path):
        path = tmp_path / "look.json"
        save_params_json(NOIR, path)

        assert json.loads(path.read_text())["tone_mapping"] == "agx"
        assert load_params_json(path) == NOIR
