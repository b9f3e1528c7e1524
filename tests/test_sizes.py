import unittest

from tinyae.errors import DataTypeError
from tinyae.sizes import (
    check_data_type,
    decoder_sizes,
    effective_size,
    encoder_sizes,
    infer_data_type,
    transcoded_size,
    word_size,
)


class TestSizes(unittest.TestCase):
    def test_number_sizes_are_unscaled(self):
        self.assertEqual(effective_size(10, "number"), 10)
        self.assertEqual(effective_size(10, "boolean"), 10)
        self.assertEqual(transcoded_size(10, 2, "number"), 6)

    def test_string_sizes_scale_by_eight(self):
        self.assertEqual(effective_size(10, "string"), 80)
        self.assertEqual(transcoded_size(10, 2, "string"), 48)
        self.assertEqual(word_size(10, "string"), 10)

    def test_transcoded_rounds_half_up(self):
        self.assertEqual(transcoded_size(10, 3, "number"), 7)
        self.assertEqual(transcoded_size(4, 1, "number"), 3)

    def test_topologies(self):
        self.assertEqual(encoder_sizes(10, 2, "number"), [10, 6, 2, 6, 10])
        self.assertEqual(decoder_sizes(10, 2, "number"), [2, 6, 10])
        self.assertEqual(encoder_sizes(10, 2, "string"), [80, 48, 16, 48, 80])
        self.assertEqual(decoder_sizes(10, 2, "string"), [16, 48, 80])

    def test_check_data_type(self):
        self.assertEqual(check_data_type("boolean"), "boolean")
        with self.assertRaises(DataTypeError):
            check_data_type("text")


class TestInferDataType(unittest.TestCase):
    def test_strings_upgrade_to_string(self):
        self.assertEqual(infer_data_type(["cat", "dog"], "number"), "string")

    def test_vectors_keep_declared_type(self):
        self.assertEqual(infer_data_type([[1, 0], [0, 1]], "boolean"), "boolean")

    def test_vectors_rejected_for_string_type(self):
        with self.assertRaises(DataTypeError):
            infer_data_type([[1, 0]], "string")

    def test_mixed_samples_rejected(self):
        with self.assertRaises(DataTypeError):
            infer_data_type(["cat", [1, 0]], "number")


if __name__ == "__main__":
    unittest.main()
