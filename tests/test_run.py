import unittest

import run


class TestRun(unittest.TestCase):
    def test_version(self):
        self.assertEqual(run.main(["--version"]), 0)

    def test_list(self):
        self.assertEqual(run.main(["-l"]), 0)

    def test_parser(self):
        args = run._parser().parse_args(["arch"])
        self.assertEqual(args.ascii, "arch")
        self.assertFalse(args.version)
        self.assertFalse(args.list)


if __name__ == "__main__":
    unittest.main()
