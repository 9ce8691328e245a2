# SPDX-License-Identifier: GPL-3.0-or-later

import unittest

from drmtop.stats.drm.base import CumulativeSnapshot
from drmtop.stats.drm.engines import normalize_record, parse_duration, parse_memory


class ParseDurationTest(unittest.TestCase):
    def test_units(self) -> None:
        self.assertEqual(parse_duration("1500 ns"), 1500)
        self.assertEqual(parse_duration("3 us"), 3_000)
        self.assertEqual(parse_duration("150 ms"), 150_000_000)

    def test_unknown_unit_is_zero(self) -> None:
        self.assertEqual(parse_duration("2 s"), 0)
        self.assertEqual(parse_duration("2 cycles"), 0)

    def test_malformed_values_are_zero(self) -> None:
        self.assertEqual(parse_duration("abc ns"), 0)
        self.assertEqual(parse_duration("-5 ns"), 0)
        self.assertEqual(parse_duration("100ns"), 0)
        self.assertEqual(parse_duration("100"), 0)
        self.assertEqual(parse_duration(""), 0)

    def test_units_are_case_sensitive(self) -> None:
        self.assertEqual(parse_duration("5 MS"), 0)
        self.assertEqual(parse_duration("5 Ns"), 0)

    def test_amount_must_be_plain_digits(self) -> None:
        self.assertEqual(parse_duration("1_000 ns"), 0)
        self.assertEqual(parse_duration("+5 ns"), 0)
        self.assertEqual(parse_duration(" 5 ns"), 0)

    def test_unit_is_not_stripped(self) -> None:
        self.assertEqual(parse_duration("5  ms"), 0)
        self.assertEqual(parse_duration("5 ms "), 0)


class ParseMemoryTest(unittest.TestCase):
    def test_kib_convention(self) -> None:
        self.assertEqual(parse_memory("512 KiB"), 512)
        self.assertEqual(parse_memory("512 kib"), 512)
        self.assertEqual(parse_memory("3 MiB"), 3 * 1024)
        self.assertEqual(parse_memory("8192"), 8)
        self.assertEqual(parse_memory("8192 B"), 8)

    def test_legacy_memory_convention(self) -> None:
        self.assertEqual(parse_memory("512 kib", legacy=True), 512)
        self.assertEqual(parse_memory("3072 mib", legacy=True), 3)
        self.assertEqual(parse_memory("2 KiB", legacy=True), 2048)
        self.assertEqual(parse_memory("8192", legacy=True), 0)

    def test_malformed_amount_is_zero(self) -> None:
        self.assertEqual(parse_memory("lots KiB"), 0)
        self.assertEqual(parse_memory("lots kib", legacy=True), 0)
        self.assertEqual(parse_memory("1_000 kib", legacy=True), 0)
        self.assertEqual(parse_memory("1_000 KiB"), 0)


class NormalizeRecordTest(unittest.TestCase):
    def test_render_and_gfx_are_summed(self) -> None:
        device, snapshot = normalize_record({
            'drm-client-id': '1',
            'drm-engine-render': '100 ns',
            'drm-engine-gfx': '50 ns',
        })
        self.assertEqual(device, '')
        self.assertEqual(snapshot.render, 150)

    def test_video_fans_out_to_encode_and_decode(self) -> None:
        _, snapshot = normalize_record({
            'drm-client-id': '1',
            'drm-engine-video': '40 us',
        })
        self.assertEqual(snapshot.encode, 40_000)
        self.assertEqual(snapshot.decode, 40_000)

    def test_amdgpu_keys(self) -> None:
        device, snapshot = normalize_record({
            'drm-client-id': '3',
            'drm-pdev': '0000:03:00.0',
            'drm-engine-gfx': '10 ms',
            'drm-engine-compute': '2 ms',
            'drm-engine-enc': '1 ms',
            'drm-engine-enc_1': '1 ms',
            'drm-engine-dec': '5 ms',
            'drm-memory-vram': '1024 KiB',
            'drm-memory-gtt': '2 MiB',
            'drm-memory-cpu': '0 KiB',
        })
        self.assertEqual(device, '0000:03:00.0')
        self.assertEqual(snapshot, CumulativeSnapshot(
            render=10_000_000,
            compute=2_000_000,
            encode=2_000_000,
            decode=5_000_000,
            vram=1024,
            gtt=2048,
        ))

    def test_unknown_keys_are_ignored(self) -> None:
        _, snapshot = normalize_record({
            'drm-client-id': '1',
            'drm-engine-capacity-render': '2',
            'drm-cycles-rcs': '12345',
            'drm-driver': 'xe',
        })
        self.assertEqual(snapshot, CumulativeSnapshot())

    def test_copy_and_video_enhance(self) -> None:
        _, snapshot = normalize_record({
            'drm-engine-copy': '7 ns',
            'drm-engine-video-enhance': '9 ns',
        })
        self.assertEqual(snapshot.copy, 7)
        self.assertEqual(snapshot.video_enhance, 9)


if __name__ == "__main__":
    unittest.main()
