import io
import json
import logging
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import mock

from config_reader import parse_config
from debug import Debug
from errors import InvalidConfiguration
from main import Config, MessageProcessor, build_config, load_options, main, parse_args
from utilities import legacy_config


def processor(cfg: Config | None = None) -> MessageProcessor:
    return MessageProcessor(parse_config(legacy_config(num_rotors=4, num_pawls=3)), cfg)


class TestMessageProcessor(unittest.TestCase):
    def test_stream(self) -> None:
        lines = [
            "* B I II III AAA",
            "AAAAA",
            "",
            "AAAA*",
            "* B I II III AAA",
            "BDZGO",
        ]
        self.assertEqual(list(processor().process(lines)), ["BDZGO", "", "", "AAAAA"])

    def test_grouping_and_newlines(self) -> None:
        out = list(processor().process(["* B I II III AAA\n", "AAAAA AAAAA AA\n"]))
        self.assertEqual(len(out), 1)
        self.assertRegex(out[0], r"^[A-Z]{5} [A-Z]{5} [A-Z]{2}$")
        self.assertTrue(out[0].startswith("BDZGO "))

    def test_block_size(self) -> None:
        out = list(processor(Config(block=4)).process(["* B I II III AAA", "AAAAA"]))
        self.assertEqual(out, ["BDZG O"])

    def test_normalize(self) -> None:
        out = list(processor(Config(normalize=True)).process(["* B I II III AAA", "a.a-a aa"]))
        self.assertEqual(out, ["BDZGO"])

    def test_message_before_settings(self) -> None:
        with self.assertRaises(InvalidConfiguration):
            list(processor().process(["AAAAA"]))

    def test_blank_lines_before_settings(self) -> None:
        out = list(processor().process(["", "* B I II III AAA", "A"]))
        self.assertEqual(out, ["", "B"])


class TestOptions(unittest.TestCase):
    def test_load_options(self) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "opts.json"
            path.write_text(json.dumps({"block": 4, "debug": ["stepping"]}), encoding="utf-8")
            cfg = load_options(path)
            self.assertEqual(cfg.block, 4)
            self.assertEqual(cfg.debug, ["stepping"])
            self.assertFalse(cfg.normalize)

    def test_bad_options(self) -> None:
        with TemporaryDirectory() as tmp:
            for label, payload in {
                "unknown key": {"colour": "red"},
                "bad block": {"block": 0},
                "bad component": {"debug": ["plugs"]},
                "not an object": [1, 2],
            }.items():
                with self.subTest(label):
                    path = Path(tmp) / "opts.json"
                    path.write_text(json.dumps(payload), encoding="utf-8")
                    with self.assertRaises(InvalidConfiguration):
                        load_options(path)

    def test_flags_override_file(self) -> None:
        with TemporaryDirectory() as tmp:
            path = Path(tmp) / "opts.json"
            path.write_text(json.dumps({"block": 4, "normalize": True}), encoding="utf-8")
            cfg = build_config(parse_args(["--options", str(path), "--block", "6"]))
            self.assertEqual(cfg.block, 6)
            self.assertTrue(cfg.normalize)


class TestMain(unittest.TestCase):
    def test_files_round_trip(self) -> None:
        with TemporaryDirectory() as tmp:
            conf = Path(tmp) / "enigma.conf"
            conf.write_text(legacy_config(num_rotors=4, num_pawls=3), encoding="utf-8")
            source = Path(tmp) / "input.txt"
            source.write_text(
                "* B I II III AAA\nAAAAA\n\n* B I II III AAA\nBDZGO\n", encoding="utf-8"
            )
            target = Path(tmp) / "output.txt"

            main([str(conf), str(source), str(target)])

            self.assertEqual(
                target.read_text(encoding="utf-8").splitlines(), ["BDZGO", "", "AAAAA"]
            )

    def run_stdio(self, argv: list, text: str) -> str:
        out = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO(text)), redirect_stdout(out):
            main(argv)
        return out.getvalue()

    def test_builtin_wheels_over_stdio(self) -> None:
        settings = "* C-THIN GAMMA IV V VI RFKL (AZ) (QM)"
        cipher = self.run_stdio(["--normalize"], f"{settings}\nHello world\n").strip()
        self.assertRegex(cipher, r"^[A-Z]{5} [A-Z]{5}$")

        plain = self.run_stdio([], f"{settings}\n{cipher}\n").strip()
        self.assertEqual(plain, "HELLO WORLD")

    def test_errors_exit_non_zero(self) -> None:
        with TemporaryDirectory() as tmp:
            conf = Path(tmp) / "enigma.conf"
            conf.write_text(legacy_config(num_rotors=4, num_pawls=3), encoding="utf-8")
            source = Path(tmp) / "input.txt"
            source.write_text("* B I II IX AAA\nAAAAA\n", encoding="utf-8")

            with self.assertRaises(SystemExit) as ctx:
                main([str(conf), str(source), str(Path(tmp) / "out.txt")])
            self.assertTrue(str(ctx.exception.code).startswith("Error:"))

    def test_log_file_written_once_per_run(self) -> None:
        with TemporaryDirectory() as tmp:
            conf = Path(tmp) / "enigma.conf"
            conf.write_text(legacy_config(num_rotors=4, num_pawls=3), encoding="utf-8")
            source = Path(tmp) / "input.txt"
            source.write_text("* B I II III AAA\nAAAAA\n", encoding="utf-8")
            log = Path(tmp) / "enigma.log"
            argv = [str(conf), str(source), str(Path(tmp) / "out.txt"),
                    "--debug", "stepping", "--log-file", str(log)]
            logger = logging.getLogger("ENIGMA")
            handlers = list(logger.handlers)

            main(argv)
            first = log.read_text(encoding="utf-8").count("[STEPPING]")
            self.assertEqual(first, 5)          # one record per key press
            self.assertEqual(logger.handlers, handlers)
            self.assertFalse(Debug.components["stepping"])

            main(argv)
            self.assertEqual(log.read_text(encoding="utf-8").count("[STEPPING]"), 2 * first)
            self.assertEqual(logger.handlers, handlers)

    def test_unwritable_log_file_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main(["--log-file", "/nonexistent/dir/enigma.log"])
        self.assertIn("could not open", str(ctx.exception.code))

    def test_missing_config_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main(["/nonexistent/enigma.conf"])
        self.assertIn("could not open", str(ctx.exception.code))


if __name__ == "__main__":
    unittest.main()
