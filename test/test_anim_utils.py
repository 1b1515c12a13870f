# !/usr/bin/python
# coding=utf-8
"""
Test Suite for harmonytk.anim_utils module

Tests for AnimUtils functionality including:
- Channel layout resolution
- Keyframe collection, deduplication and sorting
- Cel name normalization
- Keyframe to cel pairing
"""
import unittest

from base_test import HarmonyTkTestCase

from harmonytk.anim_utils._anim_utils import AnimUtils
from harmonytk.anim_utils.anim_structs import ChannelConfig, KeyframeCelPair


class TestChannelConfig(unittest.TestCase):
    """Test suite for the channel attributes implied by a ChannelConfig."""

    def test_combined_2d_channels(self):
        """Test the default 2D layout reads one column per channel group."""
        self.assertEqual(
            ChannelConfig().channel_attrs,
            ("position.attr3dpath", "scale.xy", "rotation.anglez", "skew"),
        )

    def test_separate_3d_channels(self):
        """Test a fully separated 3D layout."""
        config = ChannelConfig(
            is_3d=True,
            position_separate=True,
            scale_separate=True,
            rotation_separate=True,
        )
        self.assertEqual(
            config.channel_attrs,
            (
                "position.x",
                "position.y",
                "position.z",
                "scale.x",
                "scale.y",
                "scale.z",
                "rotation.anglex",
                "rotation.angley",
                "rotation.anglez",
                "skew",
            ),
        )

    def test_3d_combined_rotation_uses_quaternion(self):
        """Test 3D without separate rotation reads the quaternion path."""
        config = ChannelConfig(is_3d=True, scale_separate=True)
        self.assertEqual(config.rotation_attrs, ("rotation.quaternionpath",))
        self.assertEqual(config.scale_attrs, ("scale.x", "scale.y", "scale.z"))

    def test_2d_ignores_rotation_separate(self):
        """Test 2D pegs only ever read the z angle."""
        config = ChannelConfig(scale_separate=True, rotation_separate=True)
        self.assertEqual(config.rotation_attrs, ("rotation.anglez",))
        self.assertEqual(config.scale_attrs, ("scale.x", "scale.y"))


class TestAnimUtils(HarmonyTkTestCase):
    """Test suite for AnimUtils functionality."""

    def test_get_channel_config(self):
        """Test the settings flags are read from the peg."""
        rig = self.create_peg_rig(
            flags={"enable3d": True, "scale.separate": True}, keys={}
        )
        config = AnimUtils.get_channel_config(self.scene, rig["peg"])
        self.assertEqual(
            config,
            ChannelConfig(
                is_3d=True,
                position_separate=False,
                scale_separate=True,
                rotation_separate=False,
            ),
        )

    def test_get_channel_config_unresolved_flags(self):
        """Test flags missing on the node read as False."""
        peg = self.scene.add_node("Top", "Bare-p", "PEG", 0, 0)
        self.assertEqual(AnimUtils.get_channel_config(self.scene, peg), ChannelConfig())

    def test_optimize_list(self):
        """Test duplicates are removed and the result is numerically sorted."""
        self.assertEqual(AnimUtils.optimize_list([5, 1, 3, 1, 5]), [1, 3, 5])
        self.assertEqual(AnimUtils.optimize_list([10, 9, 100, 2]), [2, 9, 10, 100])
        self.assertEqual(AnimUtils.optimize_list([]), [])

    def test_collect_keyframe_times(self):
        """Test keyframes are merged across every configured channel."""
        rig = self.create_peg_rig()
        config = AnimUtils.get_channel_config(self.scene, rig["peg"])
        times = AnimUtils.collect_keyframe_times(self.scene, rig["peg"], config)
        self.assertEqual(times, [1, 2, 5, 6, 8])

    def test_collect_keyframe_times_ignores_unconfigured_channels(self):
        """Test columns on channels outside the layout are not read."""
        rig = self.create_peg_rig(
            keys={"position.x": {3: 1.0}, "rotation.anglez": {7: 2.0}}
        )
        config = AnimUtils.get_channel_config(self.scene, rig["peg"])
        # position is combined, so the separate x column is not part of the layout
        times = AnimUtils.collect_keyframe_times(self.scene, rig["peg"], config)
        self.assertEqual(times, [7])

    def test_collect_keyframe_times_unanimated(self):
        """Test a peg without linked columns has no keyframes."""
        rig = self.create_peg_rig(keys={})
        config = AnimUtils.get_channel_config(self.scene, rig["peg"])
        self.assertEqual(
            AnimUtils.collect_keyframe_times(self.scene, rig["peg"], config), []
        )

    def test_get_cel_name(self):
        """Test cel names are taken from the last '-' segment without offsets."""
        self.assertEqual(AnimUtils.get_cel_name("char-walk-001+2.tvg"), "001")
        self.assertEqual(AnimUtils.get_cel_name("char-idle-007.tvg"), "007")
        self.assertEqual(AnimUtils.get_cel_name("elements/char/char-12.tvg"), "12")
        self.assertEqual(AnimUtils.get_cel_name("A"), "A")

    def test_get_cel_name_any_extension(self):
        """Test any file extension is removed, not only the native drawing one."""
        self.assertEqual(AnimUtils.get_cel_name("char-001.png"), "001")
        self.assertEqual(AnimUtils.get_cel_name("char-walk-002+1.psd"), "002")
        self.assertEqual(AnimUtils.get_cel_name("C:\\art\\char-3.tga"), "3")

    def test_get_cel_name_empty(self):
        """Test an empty exposure has no cel."""
        self.assertEqual(AnimUtils.get_cel_name(""), "")
        self.assertEqual(AnimUtils.get_cel_name(None), "")

    def test_get_drawing_column_element_mode(self):
        """Test element mode reads the 'drawing.element' link."""
        rig = self.create_peg_rig(element_mode=True)
        self.assertEqual(
            AnimUtils.get_drawing_column(self.scene, rig["drawing"]),
            (True, rig["column"]),
        )

    def test_get_drawing_column_timing_mode(self):
        """Test timing mode reads the 'drawing.customName.timing' link."""
        rig = self.create_peg_rig(element_mode=False)
        self.assertEqual(
            AnimUtils.get_drawing_column(self.scene, rig["drawing"]),
            (False, rig["column"]),
        )

    def test_pair_keys_to_cels_worked_example(self):
        """Test frames repeating a cel, or repeating it later, are skipped."""
        rig = self.create_peg_rig()
        pairs = AnimUtils.pair_keys_to_cels(self.scene, [1, 2, 5, 6, 8], rig["column"])
        self.assertEqual(
            pairs, [KeyframeCelPair(1, "CEL1"), KeyframeCelPair(5, "CEL2")]
        )

    def test_pair_keys_to_cels_skips_empty_exposures(self):
        """Test a keyframe over an exposure gap is dropped, not an error."""
        exposures = {1: "a-1.tvg", 2: "a-1.tvg", 6: "a-2.tvg"}
        rig = self.create_peg_rig(exposures=exposures)
        pairs = AnimUtils.pair_keys_to_cels(self.scene, [1, 4, 6], rig["column"])
        self.assertEqual(pairs, [KeyframeCelPair(1, "1"), KeyframeCelPair(6, "2")])

    def test_pair_keys_to_cels_duplicate_variants(self):
        """Test numbered duplicates of a drawing count as the same cel."""
        exposures = {1: "a-3.tvg", 2: "a-3+1.tvg", 3: "a-3+2.tvg", 4: "a-4.tvg"}
        rig = self.create_peg_rig(exposures=exposures)
        pairs = AnimUtils.pair_keys_to_cels(self.scene, [1, 2, 3, 4], rig["column"])
        self.assertEqual(pairs, [KeyframeCelPair(1, "3"), KeyframeCelPair(4, "4")])

    def test_pair_keys_to_cels_invariant(self):
        """Test every cel is paired once, with the earliest frame it appears on."""
        cels = ["5", "2", "5", "", "9", "2", "2", "9", "7", ""]
        exposures = {i + 1: f"x-{cel}.tvg" for i, cel in enumerate(cels) if cel}
        rig = self.create_peg_rig(exposures=exposures)
        times = list(range(1, len(cels) + 1))

        pairs = AnimUtils.pair_keys_to_cels(self.scene, times, rig["column"])

        paired = [pair.cel for pair in pairs]
        self.assertEqual(len(paired), len(set(paired)))
        for pair in pairs:
            self.assertEqual(pair.time, cels.index(pair.cel) + 1)
        self.assertEqual(paired, ["5", "2", "9", "7"])
        self.assertEqual([p.time for p in pairs], sorted(p.time for p in pairs))

    def test_pair_keys_to_cels_without_column(self):
        """Test a drawing with no timing column yields no pairs."""
        self.assertEqual(AnimUtils.pair_keys_to_cels(self.scene, [1, 2], None), [])


if __name__ == "__main__":
    unittest.main(exit=False)
