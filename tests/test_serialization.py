import json
import unittest

import numpy as np

from tinyae import AutoEncoder, Config
from tinyae.errors import SizeMismatchError


def _trained_words() -> AutoEncoder:
    ae = AutoEncoder(5, 2, "string", cfg=Config(seed=0))
    ae.train(["cat", "dog"], {"iterations": 50})
    return ae


class TestSerialization(unittest.TestCase):
    def test_layout(self):
        obj = AutoEncoder(10, 2, "boolean", cfg=Config(seed=0)).to_json()
        self.assertEqual(set(obj), {"decodedDataSize", "encodedDataSize", "dataType", "encoder", "decoder"})
        self.assertEqual(obj["decodedDataSize"], 10)
        self.assertEqual(obj["encodedDataSize"], 2)
        self.assertEqual(obj["dataType"], "boolean")
        self.assertEqual(obj["encoder"]["sizes"], [10, 6, 2, 6, 10])

    def test_parse_preserves_behaviour(self):
        ae = _trained_words()
        copy = AutoEncoder.parse(ae.stringify())
        self.assertEqual(copy.data_type, "string")
        for w in ["cat", "dog", "xyz", ""]:
            a, b = ae.encode(w), copy.encode(w)
            self.assertTrue(np.array_equal(a, b))
            self.assertEqual(ae.decode(a), copy.decode(b))

    def test_parse_number_autoencoder(self):
        ae = AutoEncoder(6, 3, cfg=Config(seed=3))
        copy = AutoEncoder.parse(ae.stringify())
        x = [0.1, 0.9, 0.4, 0.4, 0.2, 0.7]
        self.assertTrue(np.array_equal(ae.run(x), copy.run(x)))

    def test_from_json_accepts_a_string(self):
        ae = _trained_words()
        other = AutoEncoder(5, 2, "string", cfg=Config(seed=1))
        other.from_json(ae.stringify())
        self.assertTrue(np.array_equal(ae.encode("cat"), other.encode("cat")))

    def test_recorded_sizes_must_match_networks(self):
        obj = _trained_words().to_json()
        obj["decodedDataSize"] = 6
        with self.assertRaises(SizeMismatchError):
            AutoEncoder.parse(json.dumps(obj))

        obj = _trained_words().to_json()
        obj["dataType"] = "number"
        with self.assertRaises(SizeMismatchError):
            AutoEncoder.parse(json.dumps(obj))

    def test_from_json_into_other_topology(self):
        ae = _trained_words()
        with self.assertRaises(SizeMismatchError):
            AutoEncoder(5, 1, "string").from_json(ae.to_json())

    def test_failed_load_leaves_both_networks_untouched(self):
        obj = _trained_words().to_json()
        obj["decoder"]["layers"][1]["biases"] = [0.0]
        dst = AutoEncoder(5, 2, "string", cfg=Config(seed=1))
        before = dst.to_json()
        with self.assertRaises(SizeMismatchError):
            dst.from_json(obj)
        self.assertEqual(dst.encoder.to_json(), before["encoder"])
        self.assertEqual(dst.decoder.to_json(), before["decoder"])

    def test_missing_keys(self):
        with self.assertRaises(ValueError):
            AutoEncoder.parse(json.dumps({"decodedDataSize": 5}))


if __name__ == "__main__":
    unittest.main()
