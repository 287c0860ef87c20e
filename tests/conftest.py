"""Pytest configuration and fixtures."""
import shutil
import textwrap
from pathlib import Path

import pytest

from paramscope.ast_extractors.rails_impl import DeclarationClassifier
from paramscope.ast_extractors.ruby_impl import analyze_method
from paramscope.ast_parser import RubyParser

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def ruby_parser():
    """Shared tree-sitter Ruby parser front end."""
    return RubyParser()


@pytest.fixture
def parse(ruby_parser):
    """Parse a (dedented) Ruby snippet into a tree-sitter Tree.

    Leading blank lines are dropped so line numbers match the snippet.
    """
    def _parse(source: str):
        return ruby_parser.parse_source(textwrap.dedent(source).lstrip("\n"))
    return _parse


@pytest.fixture
def analyze(parse):
    """Profile a method body given as source lines.

    The snippet is wrapped in `def <name>(<args>) ... end`.
    """
    def _analyze(body: str, name: str = "action", args: str = ""):
        signature = f"def {name}({args})" if args else f"def {name}"
        source = signature + "\n" + textwrap.indent(textwrap.dedent(body), "  ") + "\nend\n"
        tree = parse(source)
        method = tree.root_node.named_children[0]
        assert method.type == "method", f"snippet did not parse as a method: {tree.root_node}"
        return analyze_method(method)
    return _analyze


@pytest.fixture
def classify(parse):
    """Classify a Ruby file given as source text."""
    def _classify(source: str, **kwargs):
        return DeclarationClassifier(**kwargs).classify(parse(source))
    return _classify


@pytest.fixture
def default_test_case():
    """Path to the sample Rails tree (read-only)."""
    return FIXTURES_DIR / "default_test_case"


@pytest.fixture
def sample_project(tmp_path, default_test_case):
    """Writable copy of the sample Rails tree."""
    project = tmp_path / "project"
    shutil.copytree(default_test_case, project)
    return project
