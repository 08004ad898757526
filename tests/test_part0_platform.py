import os
import tempfile
import unittest

import part0_platform


class TestPart0Platform(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, name, text):
        path = os.path.join(self.tmp.name, name)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_parse_os_release_unquotes_values(self):
        data = part0_platform.parse_os_release(
            '# comment\nNAME="Arch Linux"\nID=arch\nBUILD_ID=rolling\nHOME_URL=\'https://archlinux.org/\'\n\nbogus line\n'
        )
        self.assertEqual(data["NAME"], "Arch Linux")
        self.assertEqual(data["ID"], "arch")
        self.assertEqual(data["BUILD_ID"], "rolling")
        self.assertEqual(data["HOME_URL"], "https://archlinux.org/")
        self.assertNotIn("bogus line", data)

    def test_read_os_release_uses_first_existing_path(self):
        missing = os.path.join(self.tmp.name, "nope")
        path = self._write("os-release", "ID=void\n")
        self.assertEqual(part0_platform.read_os_release((missing, path)), {"ID": "void"})
        self.assertEqual(part0_platform.read_os_release((missing,)), {})

    def test_parse_meminfo(self):
        data = part0_platform.parse_meminfo(
            "MemTotal:        8000000 kB\nMemAvailable:    4000000 kB\nHugePages_Total:       0\nBroken: x kB\n"
        )
        self.assertEqual(data["MemTotal"], 8000000)
        self.assertEqual(data["MemAvailable"], 4000000)
        self.assertEqual(data["HugePages_Total"], 0)
        self.assertNotIn("Broken", data)

    def test_read_meminfo_missing_file(self):
        self.assertEqual(part0_platform.read_meminfo(os.path.join(self.tmp.name, "meminfo")), {})

    def test_read_uptime_seconds(self):
        path = self._write("uptime", "90061.52 350000.10\n")
        self.assertEqual(part0_platform.read_uptime_seconds(path), 90061)
        self.assertIsNone(part0_platform.read_uptime_seconds(os.path.join(self.tmp.name, "none")))
        self.assertIsNone(part0_platform.read_uptime_seconds(self._write("bad", "garbage\n")))

    def test_running_processes_reads_comm(self):
        self._write("1/comm", "systemd\n")
        self._write("42/comm", "i3\n")
        self._write("self/comm", "ignored\n")
        self.assertEqual(sorted(part0_platform.running_processes(self.tmp.name)), ["i3", "systemd"])
        self.assertEqual(part0_platform.running_processes(os.path.join(self.tmp.name, "absent")), [])

    def test_run_missing_command(self):
        rc, out = part0_platform._run(["sysfetch-definitely-not-a-command"])
        self.assertEqual(rc, 127)
        self.assertEqual(out, "")

    def test_kernel_and_hostname_are_strings(self):
        self.assertIsInstance(part0_platform.kernel_release(), str)
        self.assertIsInstance(part0_platform.hostname(), str)


if __name__ == "__main__":
    unittest.main()
