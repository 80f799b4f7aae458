"""
Tests for layout configuration, presets and YAML loading.
"""

import pytest

import yaml

from mindorbit.layout.config import (
    COMPACT_LAYOUT,
    DEFAULT_LAYOUT,
    PRESETS,
    LayoutConfig,
    SectorWeighting,
    get_preset,
    list_presets,
    load_config,
)


# =============================================================================
# Defaults
# =============================================================================

class TestDefaults:
    """The default config carries the tuned constants."""

    def test_ring_radii(self):
        config = LayoutConfig()
        assert config.radial.ring_radii == (650.0, 1100.0, 1600.0)
        assert config.radial.ring_separation == 120.0

    def test_collision_defaults(self):
        config = LayoutConfig()
        assert config.collision.margin == 34.0
        assert config.collision.push_step == 28.0

    def test_force_defaults(self):
        force = LayoutConfig().force
        assert force.repulsion_strength == 30000.0
        assert force.ideal_link_length == 350.0
        assert force.damping == 0.85
        assert force.max_iterations == 400

    def test_ring_radius_extends_past_table(self):
        config = LayoutConfig()
        assert config.ring_radius(0) == 0.0
        assert config.ring_radius(1) == 650.0
        assert config.ring_radius(3) == 1600.0
        assert config.ring_radius(4) == 2100.0
        assert config.ring_radius(6) == 3100.0

    def test_default_validates(self):
        assert LayoutConfig().validate() is not None


# =============================================================================
# Overrides
# =============================================================================

class TestOverrides:
    """Tests for with_overrides."""

    def test_nested_override_returns_new_config(self):
        base = LayoutConfig()
        changed = base.with_overrides({
            "radial": {"ring_radii": [700, 1200, 1700], "weighting": "subtree"},
            "collision": {"max_iterations": 10},
            "bounds_padding": 50,
        })

        assert changed.radial.ring_radii == (700.0, 1200.0, 1700.0)
        assert changed.radial.weighting == SectorWeighting.SUBTREE
        assert changed.collision.max_iterations == 10
        assert changed.bounds_padding == 50.0
        # Original untouched
        assert base.radial.ring_radii == (650.0, 1100.0, 1600.0)
        assert base.radial.weighting == SectorWeighting.UNIFORM

    def test_profiles_override(self):
        changed = LayoutConfig().with_overrides({
            "dimensions": {"profiles": [
                {"char_width": 5, "padding": 10, "min_width": 100,
                 "max_width": 200, "height": 50},
            ]},
        })
        assert len(changed.dimensions.profiles) == 1
        assert changed.dimensions.profiles[0].height == 50

    def test_unknown_section(self):
        with pytest.raises(ValueError, match="Unknown config section"):
            LayoutConfig().with_overrides({"physics": {}})

    def test_unknown_option(self):
        with pytest.raises(ValueError, match="radial.nope"):
            LayoutConfig().with_overrides({"radial": {"nope": 1}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            LayoutConfig().with_overrides({"radial": 3})

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError, match="increasing"):
            LayoutConfig().with_overrides({"radial": {"ring_radii": [900, 800]}})
        with pytest.raises(ValueError, match="damping"):
            LayoutConfig().with_overrides({"force": {"damping": 1.5}})

    def test_to_dict_is_plain(self):
        data = LayoutConfig().to_dict()

        assert data["radial"]["weighting"] == "uniform"
        assert data["radial"]["ring_radii"] == [650.0, 1100.0, 1600.0]
        # Plain types only, so it dumps cleanly
        assert yaml.safe_load(yaml.safe_dump(data)) == data


# =============================================================================
# Presets
# =============================================================================

class TestPresets:
    """Tests for named presets."""

    def test_list_presets(self):
        assert list_presets() == ["compact", "default", "spacious"]

    def test_get_preset(self):
        assert get_preset("default") is DEFAULT_LAYOUT
        assert get_preset("compact") is COMPACT_LAYOUT

    def test_unknown_preset(self):
        with pytest.raises(ValueError, match="Available: compact, default, spacious"):
            get_preset("huge")

    @pytest.mark.parametrize("name", sorted(PRESETS))
    def test_presets_validate(self, name):
        assert get_preset(name).validate() is get_preset(name)

    def test_compact_is_smaller_than_spacious(self):
        compact = get_preset("compact").radial.ring_radii
        spacious = get_preset("spacious").radial.ring_radii
        assert all(c < s for c, s in zip(compact, spacious))


class TestLoadConfig:
    """Tests for YAML config files."""

    def test_preset_plus_overrides(self, tmp_path):
        path = tmp_path / "layout.yaml"
        path.write_text(
            "preset: compact\n"
            "radial:\n"
            "  weighting: subtree\n"
            "collision:\n"
            "  max_iterations: 100\n"
        )

        config = load_config(path)
        assert config.radial.ring_radii == COMPACT_LAYOUT.radial.ring_radii
        assert config.radial.weighting == SectorWeighting.SUBTREE
        assert config.collision.max_iterations == 100

    def test_empty_file_gives_default(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULT_LAYOUT

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)
