"""
Tests for the repr_wrangler command line front end: argument and environment
handling, output files, and the all-or-nothing behaviour on diagnostics.
"""
import os

import pytest

from repr_wrangler import ReprWrangler, main
from tests.test_utils import import_generated_module, write_def_file

GOOD_DEF = '''
@from_to_other(base_type = u8, comparison_mode = "value-based")
pub enum Status {
    A = 0,
    B = 1,
    C = 2,
    Other(u8),
}
'''

BAD_DEF = GOOD_DEF + '''
@derive(FromToRepr)
enum NoRepr { X = 1 }
'''


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("RW_INPUT_FILE", "RW_OUTPUT_DIR", "RW_OUTPUT_NAME", "RW_EXPAND", "RW_VERBOSE"):
        monkeypatch.delenv(name, raising=False)


def test_main_writes_python_module(temp_dir):
    input_path = write_def_file(temp_dir, "link.def", GOOD_DEF)
    out_dir = os.path.join(temp_dir, "out")
    assert main(["--input", input_path, "--output", out_dir]) == 0
    assert os.listdir(out_dir) == ["link_repr.py"]
    mod = import_generated_module(os.path.join(out_dir, "link_repr.py"), "link_repr_cli")
    assert mod.Status.from_u8(9) == mod.Status.Other(9)


def test_main_expand_and_output_name(temp_dir):
    input_path = write_def_file(temp_dir, "link.def", GOOD_DEF)
    out_dir = os.path.join(temp_dir, "out")
    assert main(["-i", input_path, "-o", out_dir, "-n", "regs", "-e"]) == 0
    assert sorted(os.listdir(out_dir)) == ["regs_expanded.def", "regs_repr.py"]
    with open(os.path.join(out_dir, "regs_expanded.def"), encoding="utf-8") as f:
        expanded = f.read()
    assert "from_to_other" not in expanded
    assert "    A,\n" in expanded


def test_main_writes_nothing_on_diagnostics(temp_dir, capsys):
    input_path = write_def_file(temp_dir, "bad.def", BAD_DEF)
    out_dir = os.path.join(temp_dir, "out")
    assert main(["--input", input_path, "--output", out_dir, "--expand"]) == 1
    assert not os.path.exists(out_dir)
    err = capsys.readouterr().err
    assert f"{input_path}:11:1: error[MissingAttribute]" in err


def test_main_reports_parse_errors(temp_dir, capsys):
    input_path = write_def_file(temp_dir, "broken.def", "enum E { A = }")
    assert main(["--input", input_path, "--output", temp_dir]) == 1
    assert "error[ParseError]" in capsys.readouterr().err
    assert os.listdir(temp_dir) == ["broken.def"]


def test_main_missing_input_file(temp_dir, capsys):
    assert main(["--input", os.path.join(temp_dir, "missing.def"), "--output", temp_dir]) == 1
    assert "does not exist" in capsys.readouterr().err


def test_environment_overrides(temp_dir, monkeypatch):
    input_path = write_def_file(temp_dir, "link.def", GOOD_DEF)
    out_dir = os.path.join(temp_dir, "env_out")
    monkeypatch.setenv("RW_INPUT_FILE", input_path)
    monkeypatch.setenv("RW_OUTPUT_DIR", out_dir)
    monkeypatch.setenv("RW_OUTPUT_NAME", "fromenv")
    monkeypatch.setenv("RW_EXPAND", "yes")
    assert main([]) == 0
    assert sorted(os.listdir(out_dir)) == ["fromenv_expanded.def", "fromenv_repr.py"]


def test_input_and_output_are_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2


def test_verbose_flag_controls_debug_output(temp_dir, capsys):
    input_path = write_def_file(temp_dir, "link.def", GOOD_DEF)
    ReprWrangler(input_path, temp_dir, verbose=False).run()
    assert "[DEBUG]" not in capsys.readouterr().out
    ReprWrangler(input_path, temp_dir, verbose=True).run()
    out = capsys.readouterr().out
    assert "[DEBUG] parsed 1 declaration(s)" in out
    assert "[DEBUG] expanded enum 'Status' as other" in out
