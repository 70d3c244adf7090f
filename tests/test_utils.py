import importlib.util
import os
import sys
import uuid

import pytest

# Add the parent directory to the path so we can import the modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from def_file_loader import parse_def_text
from diagnostics import DiagnosticError
from expansion_pipeline import expand_early_model
from generators.python_generator import PythonGenerator


def write_def_file(dir_path, name, content):
    """Write a .def file and return its path."""
    path = os.path.join(dir_path, name)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def import_generated_module(module_path, module_name):
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def expand_text(def_text, file="test.def"):
    """Parse and expand .def text, failing the test on any diagnostic."""
    result = expand_early_model(parse_def_text(def_text, file))
    if result.errors:
        pytest.fail("unexpected diagnostics:\n" + "\n".join(str(e) for e in result.errors))
    return result


def expansion_errors(def_text, file="test.def"):
    """Parse and expand .def text, returning the collected diagnostics."""
    return expand_early_model(parse_def_text(def_text, file)).errors


def single_error(def_text, file="test.def") -> DiagnosticError:
    errors = expansion_errors(def_text, file)
    assert len(errors) == 1, [str(e) for e in errors]
    return errors[0]


def expand_and_import(def_text, out_dir, output_name):
    """Generate the Python module for def_text into out_dir and import it under a unique name."""
    result = expand_text(def_text)
    generator = PythonGenerator(result.expansions, out_dir, output_name, "test.def")
    assert generator.generate()
    return import_generated_module(generator.output_path, f"{output_name}_{uuid.uuid4().hex}")
