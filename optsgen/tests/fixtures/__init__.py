"""Test fixtures for optsgen tests.

This module provides sample operation documents and a helper that
generates a client package and imports it.
"""

import importlib
import json
import uuid
from pathlib import Path
from types import ModuleType

from optsgen.codegen.codegen import Codegen, GenerationResult
from optsgen.config import ClientVariant, DocumentConfig

# Market data API: one operation with parameters, one without
TIME_SERIES_DOCUMENT = {
    'title': 'Market Data API',
    'baseUrl': 'https://api.example.com',
    'schemas': {
        'TimeSeries': {
            'description': 'Bars for one symbol.',
            'properties': {
                'symbol': {'type': 'string'},
                'interval': {'type': 'string'},
                'values': {'type': 'array', 'items': {'$ref': 'Bar'}},
            },
            'required': ['symbol'],
        },
        'Bar': {
            'properties': {
                'datetime': {'type': 'string'},
                'close': {'type': 'number'},
            },
            'required': ['datetime', 'close'],
        },
        'ErrorBody': {
            'properties': {
                'code': {'type': 'integer'},
                'message': {'type': 'string'},
            },
        },
    },
    'operations': [
        {
            'name': 'getTimeSeries',
            'method': 'get',
            'path': '/time_series',
            'description': 'Fetch bars for a symbol.',
            'parameters': [
                {
                    'name': 'symbol',
                    'in': 'query',
                    'required': True,
                    'type': {'type': 'string'},
                    'description': 'Ticker symbol.',
                },
                {
                    'name': 'interval',
                    'in': 'query',
                    'required': True,
                    'type': {'type': 'string'},
                },
                {
                    'name': 'outputsize',
                    'in': 'query',
                    'type': {'type': 'integer'},
                },
            ],
            'returnType': {'$ref': 'TimeSeries'},
            'errorType': {'$ref': 'ErrorBody'},
        },
        {
            'name': 'ping',
            'method': 'get',
            'path': '/ping',
            'returnType': {
                'type': 'object',
                'additionalProperties': {'type': 'string'},
            },
        },
    ],
}

# Users API exercising every parameter location
USERS_DOCUMENT = {
    'title': 'Users API',
    'baseUrl': 'http://testserver',
    'schemas': {
        'User': {
            'properties': {
                'id': {'type': 'integer'},
                'name': {'type': 'string'},
                'email': {'type': 'string'},
                'requestId': {'type': 'string'},
            },
            'required': ['id', 'name'],
        },
        'NewUser': {
            'properties': {
                'name': {'type': 'string'},
                'email': {'type': 'string'},
            },
            'required': ['name'],
        },
        'ErrorBody': {
            'properties': {
                'code': {'type': 'integer'},
                'message': {'type': 'string'},
            },
        },
    },
    'operations': [
        {
            'name': 'getUser',
            'method': 'get',
            'path': '/users/{userId}',
            'parameters': [
                {
                    'name': 'userId',
                    'in': 'path',
                    'required': True,
                    'type': {'type': 'integer'},
                },
                {
                    'name': 'X-Request-Id',
                    'in': 'header',
                    'type': {'type': 'string'},
                },
            ],
            'returnType': {'$ref': 'User'},
            'errorType': {'$ref': 'ErrorBody'},
        },
        {
            'name': 'createUser',
            'method': 'post',
            'path': '/users',
            'parameters': [
                {
                    'name': 'user',
                    'in': 'body',
                    'required': True,
                    'type': {'$ref': 'NewUser'},
                },
            ],
            'returnType': {'$ref': 'User'},
        },
        {
            'name': 'searchUsers',
            'method': 'get',
            'path': '/users',
            'parameters': [
                {
                    'name': 'ids',
                    'in': 'query',
                    'type': {'type': 'array', 'items': {'type': 'integer'}},
                    'collectionFormat': 'csv',
                },
                {
                    'name': 'tags',
                    'in': 'query',
                    'type': {'type': 'array', 'items': {'type': 'string'}},
                    'collectionFormat': 'multi',
                },
            ],
            'returnType': {'type': 'array', 'items': {'$ref': 'User'}},
        },
        {
            'name': 'login',
            'method': 'post',
            'path': '/login',
            'parameters': [
                {
                    'name': 'username',
                    'in': 'form',
                    'required': True,
                    'type': {'type': 'string'},
                },
                {
                    'name': 'password',
                    'in': 'form',
                    'required': True,
                    'type': {'type': 'string'},
                },
            ],
            'returnType': {
                'type': 'object',
                'additionalProperties': {'type': 'string'},
            },
        },
        {
            'name': 'health',
            'method': 'get',
            'path': '/health',
        },
    ],
}


def write_document(directory: Path, document: dict, name: str = 'api.json') -> Path:
    path = directory / name
    path.write_text(json.dumps(document), encoding='utf-8')
    return path


def generate_client(
    tmp_path: Path,
    monkeypatch,
    document: dict,
    variant: ClientVariant = ClientVariant.OPTIONS,
) -> tuple[ModuleType, GenerationResult]:
    """Generate a client package for ``document`` and import it.

    Each call uses a fresh package name, so generated modules never clash
    in ``sys.modules``.
    """
    package = f'client_{uuid.uuid4().hex}'
    source = write_document(tmp_path, document)
    config = DocumentConfig(
        source=str(source),
        output=str(tmp_path / package),
        client_variant=variant,
    )
    result = Codegen(config).generate()

    monkeypatch.syspath_prepend(str(tmp_path))
    return importlib.import_module(package), result
