"""Tests for codegen utility functions."""

import ast
import py_compile

import pytest

from optsgen.codegen.utils import (
    sanitize_identifier,
    sanitize_member_name,
    sanitize_parameter_field_name,
    write_mod,
    write_text_mod,
)


class TestSanitizeIdentifier:
    """Test PascalCase class name derivation."""

    @pytest.mark.parametrize(
        'name,expected',
        [
            ('getTimeSeries', 'GetTimeSeries'),
            ('get_time_series', 'GetTimeSeries'),
            ('list-pets', 'ListPets'),
            ('pet owner', 'PetOwner'),
            ('café', 'Cafe'),
            ('2fa', '_2fa'),
            ('', 'UnnamedType'),
            ('---', 'UnnamedType'),
        ],
    )
    def test_sanitize_identifier(self, name, expected):
        assert sanitize_identifier(name) == expected


class TestSanitizeParameterFieldName:
    @pytest.mark.parametrize(
        'name,expected',
        [
            ('symbol', 'symbol'),
            ('X-Request-Id', 'X_Request_Id'),
            ('page size', 'page_size'),
            ('filter.name', 'filter_name'),
            ('class', 'class_'),
            ('1st', '_1st'),
            ('a$b', 'ab'),
        ],
    )
    def test_sanitize(self, name, expected):
        assert sanitize_parameter_field_name(name) == expected

    def test_empty_name(self):
        with pytest.raises(ValueError, match='Name cannot be empty'):
            sanitize_parameter_field_name('')


class TestSanitizeMemberName:
    """Test names used as fields, setters and locals."""

    def test_private_names_get_prefix(self):
        assert sanitize_member_name('_internal') == 'field_internal'
        assert sanitize_member_name('1st') == 'field_1st'

    def test_base_model_attributes_get_suffix(self):
        assert sanitize_member_name('json') == 'json_'
        assert sanitize_member_name('copy') == 'copy_'

    def test_reserved_names_get_suffix(self):
        assert sanitize_member_name('params', frozenset({'params'})) == 'params_'
        assert sanitize_member_name('params') == 'params'

    def test_only_invalid_characters(self):
        assert sanitize_member_name('$$') == 'field'


class TestWriteMod:
    """Test writing generated modules."""

    def test_write_mod(self, tmp_path):
        body = [ast.Assign(targets=[ast.Name(id='x', ctx=ast.Store())], value=ast.Constant(1))]
        path = tmp_path / 'pkg' / 'mod.py'

        source = write_mod(body, path, docstring='Generated module.')

        assert source == '"""Generated module."""\nx = 1\n'
        assert path.read_text() == source

    def test_invalid_source_is_not_written(self, tmp_path):
        path = tmp_path / 'broken.py'

        with pytest.raises(py_compile.PyCompileError):
            write_text_mod('def broken(:\n', path)

        assert not path.exists()
