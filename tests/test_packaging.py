#!/usr/bin/env python3
"""
Checks on pyproject.toml: every installed module exists and the entry points
resolve to modules with distinctive names.
"""

import os

import pytest

tomllib = pytest.importorskip('tomllib')

ROOT = os.path.join(os.path.dirname(__file__), '..')


@pytest.fixture(scope='module')
def pyproject():
    with open(os.path.join(ROOT, 'pyproject.toml'), 'rb') as f:
        return tomllib.load(f)


class TestPyproject:
    """Test the declared modules and scripts"""

    def test_readme_is_not_design_notes(self, pyproject):
        """The design ledger is not the package's long description"""
        assert pyproject['project'].get('readme') != 'DESIGN.md'

    def test_py_modules_exist(self, pyproject):
        for name in pyproject['tool']['setuptools']['py-modules']:
            assert os.path.isfile(os.path.join(ROOT, 'src', name + '.py')), name

    def test_no_generic_main_module(self, pyproject):
        assert 'main' not in pyproject['tool']['setuptools']['py-modules']

    def test_scripts_point_at_installed_modules(self, pyproject):
        modules = set(pyproject['tool']['setuptools']['py-modules'])
        scripts = pyproject['project']['scripts']
        assert scripts['ibus-engine-japinput'] == 'japinput_main:main'
        for target in scripts.values():
            assert target.split(':')[0] in modules
