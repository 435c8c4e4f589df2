from __future__ import annotations

import io
import os
import random
import tempfile
import unittest
import zlib
from pathlib import Path
from unittest import mock

from adlerz import Adler32, checksum, checksum_file, select_engine
from adlerz import config as adlerz_config
from adlerz.config import EngineConfig, current_config, from_environment, load_config, reload_config
from adlerz.engine import ENGINES, vector_available
from adlerz.errors import ConfigError, UnknownEngineError


AUTO = EngineConfig(engine="auto", vector=True, vector_threshold=64)
SCALAR_ONLY = EngineConfig(engine="auto", vector=False, vector_threshold=64)


class SelectEngineTests(unittest.TestCase):
    def test_auto_uses_threshold(self):
        self.assertEqual(select_engine(None, 63, AUTO), "scalar")
        self.assertEqual(select_engine(None, 64, AUTO), "vector")
        self.assertEqual(select_engine("auto", 10_000, SCALAR_ONLY), "scalar")
        self.assertEqual(select_engine(None, None, AUTO), "scalar")

    def test_explicit_names(self):
        for name in ("scalar", "vector", "zlib"):
            self.assertEqual(select_engine(name, 1, AUTO), name)
        self.assertEqual(select_engine("ZLIB", 1, AUTO), "zlib")

    def test_configured_default_engine(self):
        cfg = EngineConfig(engine="zlib")
        self.assertEqual(select_engine(None, 1 << 20, cfg), "zlib")

    def test_unknown_and_disabled(self):
        with self.assertRaises(UnknownEngineError):
            select_engine("sse9", 1, AUTO)
        self.assertEqual(select_engine("vector", 1 << 20, SCALAR_ONLY), "scalar")
        self.assertFalse(vector_available(SCALAR_ONLY))
        self.assertTrue(vector_available(AUTO))


class ChecksumApiTests(unittest.TestCase):
    def test_all_engines_agree(self):
        rng = random.Random(16)
        for n in (0, 1, 15, 16, 17, 5551, 5552, 5553, 11104, 70_000):
            data = rng.randbytes(n)
            results = {name: checksum(data, name, config=AUTO) for name in ENGINES}
            self.assertEqual(len(set(results.values())), 1, (n, results))
            self.assertEqual(results["scalar"], zlib.adler32(data))

    def test_known_values(self):
        self.assertEqual(checksum(b"", config=AUTO), 1)
        self.assertEqual(checksum(b"Wikipedia", config=AUTO), 0x11E60398)
        self.assertEqual(checksum(b"\x00", config=AUTO), 0x00010001)

    def test_continue_from_value(self):
        self.assertEqual(checksum(b"pedia", "vector", value=checksum(b"Wiki", config=AUTO), config=AUTO), 0x11E60398)

    def test_disabled_vector_engine_falls_back(self):
        cfg = EngineConfig(engine="vector", vector=False)
        self.assertEqual(checksum(b"Wikipedia", config=cfg), 0x11E60398)
        data = random.Random(21).randbytes(20_000)
        self.assertEqual(checksum(data, "vector", config=cfg), zlib.adler32(data))
        self.assertEqual(Adler32(data, engine="vector", config=cfg).value, zlib.adler32(data))

    def test_strided_buffers_agree_across_engines(self):
        raw = bytes(range(256)) * 40
        strided = memoryview(raw)[::2]
        expected = zlib.adler32(raw[::2])
        for name in ENGINES:
            self.assertEqual(checksum(strided, name, config=AUTO), expected, name)
            self.assertEqual(checksum(strided[:1000], name, config=AUTO), zlib.adler32(raw[:2000:2]), name)
        self.assertEqual(checksum(strided, config=AUTO), expected)
        self.assertEqual(Adler32(strided, config=AUTO).value, expected)


class Adler32Tests(unittest.TestCase):
    def test_streaming_matches_one_shot(self):
        rng = random.Random(4)
        data = rng.randbytes(40_000)
        for _ in range(5):
            h = Adler32(config=AUTO)
            pos = 0
            while pos < len(data):
                step = rng.choice((1, 15, 16, 31, 100, 5552, 9000))
                h.update(data[pos : pos + step])
                pos += step
            self.assertEqual(h.value, zlib.adler32(data))
            self.assertEqual(h.length, len(data))

    def test_digest_forms(self):
        h = Adler32(b"Wiki", config=AUTO)
        h.update(memoryview(b"pedia"))
        self.assertEqual(h.digest(), b"\x11\xe6\x03\x98")
        self.assertEqual(h.hexdigest(), "11e60398")
        self.assertEqual(h.name, "adler32")
        self.assertEqual(h.digest_size, 4)

    def test_copy_is_independent(self):
        h = Adler32(b"Wiki", config=AUTO)
        c = h.copy()
        c.update(b"pedia")
        self.assertEqual(h.value, zlib.adler32(b"Wiki"))
        self.assertEqual(c.value, 0x11E60398)
        self.assertEqual(c.length, 9)

    def test_state_snapshot(self):
        h = Adler32(b"Wikipedia", config=AUTO)
        st = h.state
        st.s1 = 0
        self.assertEqual(h.value, 0x11E60398)

    def test_bad_engine_fails_early(self):
        with self.assertRaises(UnknownEngineError):
            Adler32(engine="nope", config=AUTO)


class ChecksumFileTests(unittest.TestCase):
    def test_path_and_handle(self):
        data = random.Random(8).randbytes(123_457)
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / "blob.bin"
            p.write_bytes(data)
            self.assertEqual(checksum_file(p, chunk_size=4096, config=AUTO), zlib.adler32(data))
            self.assertEqual(checksum_file(str(p), config=AUTO), zlib.adler32(data))
        self.assertEqual(checksum_file(io.BytesIO(data), chunk_size=777, config=AUTO), zlib.adler32(data))

    def test_empty_file(self):
        self.assertEqual(checksum_file(io.BytesIO(b""), config=AUTO), 1)

    def test_bad_chunk_size(self):
        with self.assertRaises(ValueError):
            checksum_file(io.BytesIO(b"x"), chunk_size=0, config=AUTO)


class ConfigTests(unittest.TestCase):
    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            cfg = load_config()
        self.assertEqual(cfg, EngineConfig())

    def test_environment_overrides(self):
        env = {"ADLERZ_ENGINE": "Scalar", "ADLERZ_VECTOR": "off", "ADLERZ_VECTOR_THRESHOLD": "100"}
        with mock.patch.dict(os.environ, env, clear=True):
            cfg = load_config()
        self.assertEqual(cfg, EngineConfig(engine="scalar", vector=False, vector_threshold=100))

    def test_invalid_values(self):
        for env in (
            {"ADLERZ_ENGINE": "avx512"},
            {"ADLERZ_VECTOR": "maybe"},
            {"ADLERZ_VECTOR_THRESHOLD": "lots"},
            {"ADLERZ_VECTOR_THRESHOLD": "-1"},
        ):
            with mock.patch.dict(os.environ, env, clear=True):
                with self.assertRaises(ConfigError):
                    load_config()

    def test_from_environment_required_key(self):
        with mock.patch.dict(os.environ, {"PRESENT": "x"}, clear=True):
            self.assertEqual(from_environment(["PRESENT"]), {"PRESENT": "x"})
            self.assertEqual(from_environment(("PRESENT",)), {"PRESENT": "x"})
            self.assertEqual(from_environment({"ABSENT": "d"}), {"ABSENT": "d"})
            with self.assertRaises(ConfigError):
                from_environment("ABSENT")
            with self.assertRaises(TypeError):
                from_environment(42)

    def test_current_config_is_cached_until_reload(self):
        saved = adlerz_config._current
        self.addCleanup(setattr, adlerz_config, "_current", saved)
        with mock.patch.dict(os.environ, {"ADLERZ_ENGINE": "zlib"}, clear=True):
            first = reload_config()
            self.assertEqual(first.engine, "zlib")
            os.environ["ADLERZ_ENGINE"] = "scalar"
            self.assertIs(current_config(), first)
            self.assertEqual(select_engine(None, 10), "zlib")
            self.assertEqual(reload_config().engine, "scalar")
            self.assertEqual(select_engine(None, 10), "scalar")


if __name__ == "__main__":
    unittest.main()
