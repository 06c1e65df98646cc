"""Tests for the command-line interface.

WHY: The CLI is the scripted way in. Its flags, aliases, exit codes, and
stdout/stderr split are a contract with shell scripts that call it.

HOW: main() is called with explicit argv lists against files under
tmp_path. capsys captures output. Non-zero exits surface as SystemExit.

RULES:
- stdout carries only --json payloads; status text goes to stderr
- Exit code 1 for processing errors, 2 for usage errors
"""

import json

import pytest

from wav_bitwise import __version__
from wav_bitwise.cli import build_parser, main
from wavfiles import build_wav


def _exit_code(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestArgumentParsing:
    """build_parser() behaviour."""

    @pytest.mark.parametrize("flag,name", [
        ("-r", "right"), ("--right", "right"),
        ("-l", "left"), ("--left", "left"),
        ("-a", "and"), ("--and", "and"),
        ("-o", "or"), ("--or", "or"),
        ("-z", "xor"), ("-x", "xor"), ("--xor", "xor"),
    ])
    def test_operation_flags(self, flag, name):
        args = build_parser().parse_args(["in.wav", "out.wav", flag, "3"])
        assert args.operation == (name, 3)

    def test_not_takes_no_value(self):
        args = build_parser().parse_args(["-n", "in.wav", "out.wav"])
        assert args.operation == ("not", 0)

    def test_two_operations_rejected(self):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["in.wav", "out.wav", "-n", "-r", "1"])
        assert excinfo.value.code == 2

    def test_non_integer_operand_rejected(self):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["in.wav", "out.wav", "-a", "0xff"])
        assert excinfo.value.code == 2

    def test_bad_window_size_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["in.wav", "out.wav", "-n", "--window-size", "0"])

    def test_defaults(self):
        args = build_parser().parse_args(["in.wav", "out.wav", "-n"])
        assert args.window_size is None
        assert args.info is False
        assert args.quiet is False

    def test_version(self, capsys):
        assert _exit_code(["--version"]) == 0
        assert __version__ in capsys.readouterr().out


class TestTransform:
    """Running a transform from the command line."""

    def test_xor_quiet(self, minimal_wav_path, tmp_path, capsys):
        output = tmp_path / "out.wav"
        main([str(minimal_wav_path), str(output), "-x", "255", "-q"])
        assert output.read_bytes()[44:] == bytes([0xF0, 0x0F, 0xAA])
        captured = capsys.readouterr()
        assert captured.out == ""

    def test_status_output(self, minimal_wav_path, tmp_path, capsys):
        output = tmp_path / "out.wav"
        main([str(minimal_wav_path), str(output), "--right", "4"])
        err = capsys.readouterr().err
        assert "Operation: right 4" in err
        assert "Sample rate: 8000 Hz" in err
        assert "Progress: 100% (3/3 bytes)" in err
        assert "Done! Result saved to {}".format(output) in err
        assert output.read_bytes()[44:] == bytes([0x00, 0x0F, 0x05])

    def test_json_summary(self, minimal_wav_path, tmp_path, capsys):
        output = tmp_path / "out.wav"
        main([str(minimal_wav_path), str(output), "--xor", "255", "--json"])
        summary = json.loads(capsys.readouterr().out)
        assert summary["operation"] == "xor"
        assert summary["value"] == 255
        assert summary["bytes_processed"] == 3
        assert summary["data_offset"] == 44

    def test_no_trailing(self, tmp_path):
        source = tmp_path / "in.wav"
        source.write_bytes(build_wav(after_data=[(b"LIST", b"INFOabcd")]))
        output = tmp_path / "out.wav"
        main([str(source), str(output), "-n", "-q", "--no-trailing"])
        assert len(output.read_bytes()) == 47

    def test_window_size_option(self, tmp_path):
        source = tmp_path / "in.wav"
        source.write_bytes(build_wav(data=bytes(100)))
        output = tmp_path / "out.wav"
        main([str(source), str(output), "-o", "1", "-q", "--window-size", "7"])
        assert output.read_bytes()[44:] == bytes([1] * 100)


class TestExitCodes:
    """Failures and their exit status."""

    def test_missing_operation(self, minimal_wav_path, tmp_path):
        assert _exit_code([str(minimal_wav_path), str(tmp_path / "out.wav")]) == 2

    def test_missing_output(self, minimal_wav_path):
        assert _exit_code([str(minimal_wav_path), "-n"]) == 2

    def test_shift_out_of_range(self, minimal_wav_path, tmp_path, capsys):
        output = tmp_path / "out.wav"
        assert _exit_code([str(minimal_wav_path), str(output), "-r", "8"]) == 1
        assert "Shift value must be in range 0-7" in capsys.readouterr().err
        assert not output.exists()

    def test_missing_input(self, tmp_path, capsys):
        code = _exit_code([str(tmp_path / "nope.wav"), str(tmp_path / "out.wav"), "-n", "-q"])
        assert code == 1
        assert "Error: Cannot open input file" in capsys.readouterr().err

    def test_unsupported_format(self, tmp_path, capsys):
        source = tmp_path / "float.wav"
        source.write_bytes(build_wav(audio_format=3, bits_per_sample=32, data=bytes(8)))
        output = tmp_path / "out.wav"
        assert _exit_code([str(source), str(output), "-n"]) == 1
        assert "Only PCM format supported" in capsys.readouterr().err
        assert not output.exists()

    def test_truncated_reports_partial_output(self, tmp_path, capsys):
        source = tmp_path / "short.wav"
        source.write_bytes(build_wav(declared_data_size=50))
        output = tmp_path / "out.wav"
        assert _exit_code([str(source), str(output), "-n", "-q"]) == 1
        err = capsys.readouterr().err
        assert "Read incomplete chunk" in err
        assert "Partial output left at {}".format(output) in err
        assert output.exists()


class TestInfo:
    """--info mode."""

    def test_text(self, minimal_wav_path, capsys):
        main([str(minimal_wav_path), "--info"])
        err = capsys.readouterr().err
        assert "Format: PCM" in err
        assert "Data offset: 44 bytes" in err
        assert "fmt  @ 20, size=16" in err

    def test_json(self, tmp_path, capsys):
        source = tmp_path / "in.wav"
        source.write_bytes(build_wav(before_data=[(b"LIST", b"INFO")]))
        main([str(source), "--info", "--json"])
        report = json.loads(capsys.readouterr().out)
        assert report["audio_format"] == 1
        assert report["data_offset"] == 56
        assert report["data_size"] == 3
        assert report["duration_s"] == pytest.approx(3 / 8000)
        assert [c["id"] for c in report["chunks"]] == ["fmt ", "LIST", "data"]

    def test_info_on_garbage(self, tmp_path, capsys):
        source = tmp_path / "bad.wav"
        source.write_bytes(b"not a wav file at all")
        assert _exit_code([str(source), "--info"]) == 1
        assert "Error:" in capsys.readouterr().err
