# SPDX-License-Identifier: GPL-3.0-or-later

import tempfile
import unittest
from pathlib import Path

from drmtop.stats.drm.fdinfo import (
    DRM_CLIENT_ID,
    client_id,
    collect_clients,
    parse_fdinfo,
    read_fdinfo,
)

I915_FDINFO = """pos:\t0
flags:\t02100002
mnt_id:\t24
ino:\t1061
drm-driver:\ti915
drm-client-id:\t7
drm-pdev:\t0000:00:02.0
drm-engine-render:\t9288864723 ns
drm-engine-copy:\t0 ns
drm-engine-video:\t1503 ns
drm-engine-video-enhance:\t0 ns
"""


class ParseFdinfoTest(unittest.TestCase):
    def test_keeps_only_drm_keys(self) -> None:
        record = parse_fdinfo(I915_FDINFO)
        self.assertNotIn('pos', record)
        self.assertNotIn('flags', record)
        self.assertEqual(record['drm-driver'], 'i915')
        self.assertEqual(record['drm-client-id'], '7')
        self.assertEqual(record['drm-engine-render'], '9288864723 ns')

    def test_value_split_on_first_colon(self) -> None:
        record = parse_fdinfo("drm-pdev: 0000:03:00.0\n")
        self.assertEqual(record, {'drm-pdev': '0000:03:00.0'})

    def test_lines_without_colon_are_ignored(self) -> None:
        self.assertEqual(parse_fdinfo("drm\ndrm-engine-gfx 5 ns\n"), {})

    def test_empty_text(self) -> None:
        self.assertEqual(parse_fdinfo(""), {})


class ReadFdinfoTest(unittest.TestCase):
    def test_missing_file_gives_empty_record(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            self.assertEqual(read_fdinfo(Path(temp_dir) / "missing"), {})

    def test_reads_file(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "4"
            path.write_text(I915_FDINFO)
            self.assertEqual(read_fdinfo(path)['drm-pdev'], '0000:00:02.0')


class CollectClientsTest(unittest.TestCase):
    def test_records_without_client_id_are_discarded(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            no_id = Path(temp_dir) / "3"
            no_id.write_text("drm-engine-render:\t500 ns\ndrm-pdev:\t0000:00:02.0\n")
            with_id = Path(temp_dir) / "4"
            with_id.write_text(I915_FDINFO)

            clients = collect_clients([no_id, with_id])
            self.assertEqual(list(clients), [7])
            self.assertIn(DRM_CLIENT_ID, clients[7])

    def test_duplicate_descriptors_collapse(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            paths = []
            for fd in ("5", "6"):
                path = Path(temp_dir) / fd
                path.write_text(I915_FDINFO)
                paths.append(path)
            self.assertEqual(len(collect_clients(paths)), 1)

    def test_unparseable_client_id_is_zero(self) -> None:
        self.assertEqual(client_id({'drm-client-id': 'abc'}), 0)
        self.assertEqual(client_id({'drm-client-id': '12'}), 12)


if __name__ == "__main__":
    unittest.main()
