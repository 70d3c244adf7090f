#!/usr/bin/env python3
"""
ReprWrangler

This script reads enumeration declarations from a .def file and generates the
conversion code between each enumeration and its integer representation. The
purpose is to let the generator, not a human, keep symbolic values and wire
values consistent for binary protocols and register maps.

Usage:
    python repr_wrangler.py --input <input_file> --output <output_dir> [--output-name <name>] [--expand] [--verbose] [--help]

Arguments:
    --input, -i       : Path to the .def file containing enumeration declarations
    --output, -o      : Directory where output files will be generated
    --output-name, -n : Base name for output files without extension (default: input filename)
                        The Python module is written as <name>_repr.py
                        Expanded declarations are written as <name>_expanded.def
    --expand, -e      : Also write the expanded declarations (discriminants stripped)
    --verbose, -v     : Enable verbose output for debugging
    --help, -h        : Show this help message

Environment variables RW_INPUT_FILE, RW_OUTPUT_DIR, RW_OUTPUT_NAME, RW_EXPAND and
RW_VERBOSE override the corresponding arguments.

Example:
    python repr_wrangler.py --input registers.def --output ./generated
    python repr_wrangler.py --input registers.def --output ./generated --expand --output-name regs
"""

import argparse
import os
import sys
from typing import List, Optional

from def_file_loader import load_def_file, output_name_for
from diagnostics import DiagnosticError
from expansion_pipeline import ExpansionResult, expand_early_model
from generators.def_renderer import DefRenderer
from generators.python_generator import PythonGenerator

TRUE_VALUES = ("1", "true", "yes", "on")


class ReprWrangler:
    """
    Handles the expansion of enumeration declarations from a .def file into a
    Python module (and optionally expanded .def text).
    """

    def __init__(self, input_file: str, output_dir: str, output_name: str = None, expand: bool = False, verbose: bool = False):
        """
        Initialize the converter with input file and output directory.

        Args:
            input_file: Path to the input .def file
            output_dir: Directory where output files will be generated
            output_name: Base name for output files without extension (default: input filename)
            expand: Whether to write the expanded declarations as well
            verbose: Whether to print debug information (default: False)
        """
        self.input_file = input_file
        self.output_dir = output_dir
        self.expand = expand
        self.verbose = verbose
        self.result: Optional[ExpansionResult] = None
        self.errors: List[DiagnosticError] = []

        if output_name is None:
            self.output_name = output_name_for(input_file)
        else:
            self.output_name = output_name

    def debug_print(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}")

    def log_error(self, error: DiagnosticError) -> None:
        self.errors.append(error)
        print(str(error), file=sys.stderr)

    def parse_input_file(self) -> bool:
        """
        Parse the input file and expand every declaration.

        Returns:
            bool: True if every declaration expanded without a diagnostic
        """
        if not os.path.exists(self.input_file):
            print(f"Error: Input file '{self.input_file}' does not exist.", file=sys.stderr)
            return False
        try:
            early_model = load_def_file(self.input_file)
        except DiagnosticError as e:
            self.log_error(e)
            return False
        self.debug_print(f"parsed {len(early_model.enums)} declaration(s) from {self.input_file}")

        self.result = expand_early_model(early_model, self.verbose)
        for error in self.result.errors:
            self.log_error(error)
        return self.result.ok

    def generate_python_output(self) -> bool:
        if not self.result or not self.result.ok:
            print("Error: No valid expansion available. Parse input file first.", file=sys.stderr)
            return False
        generator = PythonGenerator(self.result.expansions, self.output_dir, self.output_name, self.input_file)
        return generator.generate()

    def generate_expanded_output(self) -> bool:
        if not self.result or not self.result.ok:
            print("Error: No valid expansion available. Parse input file first.", file=sys.stderr)
            return False
        renderer = DefRenderer([e.declaration for e in self.result.expansions], self.output_dir, self.output_name)
        return renderer.generate()

    def run(self) -> bool:
        if not self.parse_input_file():
            return False
        success = self.generate_python_output()
        if self.expand and not self.generate_expanded_output():
            success = False
        return success


def parse_arguments(argv: Optional[List[str]] = None):
    """
    Parse command line arguments.

    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Generate integer conversions for tagged enumerations",
        formatter_class=argparse.RawTextHelpFormatter
    )

    parser.add_argument('--input', '-i', required='RW_INPUT_FILE' not in os.environ,
                        help='Path to the .def file containing enumeration declarations')
    parser.add_argument('--output', '-o', required='RW_OUTPUT_DIR' not in os.environ,
                        help='Directory where output files will be generated')
    parser.add_argument('--output-name', '-n', help='Base name for output files without extension (default: input filename)')
    parser.add_argument('--expand', '-e', action='store_true', help='Also write the expanded declarations')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose output for debugging')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point of the script.
    """
    args = parse_arguments(argv)

    # Override with environment variables if set
    input_file = os.environ.get('RW_INPUT_FILE', args.input)
    output_dir = os.environ.get('RW_OUTPUT_DIR', args.output)
    output_name = os.environ.get('RW_OUTPUT_NAME', args.output_name)
    expand = args.expand or os.environ.get('RW_EXPAND', '').lower() in TRUE_VALUES
    verbose = args.verbose or os.environ.get('RW_VERBOSE', '').lower() in TRUE_VALUES

    converter = ReprWrangler(input_file, output_dir, output_name, expand, verbose)

    if converter.run():
        print("Enumeration expansion completed successfully.")
        return 0
    print("Enumeration expansion completed with errors.", file=sys.stderr)
    return 1


if __name__ == '__main__':
    sys.exit(main())
