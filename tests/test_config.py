import unittest

from tinyae.config import Config, TrainOptions


class TestTrainOptions(unittest.TestCase):
    def test_defaults_come_from_config(self):
        opts = TrainOptions.build(Config(iterations=7, learning_rate=0.5))
        self.assertEqual(opts.iterations, 7)
        self.assertEqual(opts.learning_rate, 0.5)

    def test_camel_case_aliases(self):
        opts = TrainOptions.build(Config(), {"errorThresh": 0.1, "learningRate": 0.2, "iterations": 3})
        self.assertEqual(opts.error_thresh, 0.1)
        self.assertEqual(opts.learning_rate, 0.2)
        self.assertEqual(opts.iterations, 3)

    def test_unknown_keys_pass_through(self):
        opts = TrainOptions.build(Config(), {"timeout": 5, "callbackPeriod": 2})
        self.assertEqual(opts.extra, {"timeout": 5, "callbackPeriod": 2})

    def test_rejects_bad_values(self):
        for bad in ({"iterations": 0}, {"error_thresh": -1}, {"learning_rate": 0}, {"optimizer": "lbfgs"}):
            with self.assertRaises(ValueError):
                TrainOptions.build(Config(), bad)


class TestConfig(unittest.TestCase):
    def test_rejects_unknown_activation(self):
        with self.assertRaises(ValueError):
            Config(activation="softmax")

    def test_rejects_bad_dropout(self):
        with self.assertRaises(ValueError):
            Config(dropout=1.0)


if __name__ == "__main__":
    unittest.main()
