import sys
import os
from tempfile import TemporaryDirectory
import pytest
# Ensure the project root is on sys.path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with TemporaryDirectory() as dir_path:
        yield dir_path

@pytest.fixture
def generate_module(temp_dir):
    """Expand .def text, write the Python module and import it."""
    from tests.test_utils import expand_and_import

    counter = iter(range(1000))

    def _generate(def_text: str):
        return expand_and_import(def_text, temp_dir, f"generated_{next(counter)}")
    return _generate
