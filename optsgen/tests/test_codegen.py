"""End-to-end tests: generate a client package, import it and call it."""

import asyncio
import copy
import datetime
import inspect
import itertools

import httpx
import pytest

from optsgen.codegen.codegen import Codegen
from optsgen.config import ClientVariant, DocumentConfig
from optsgen.exceptions import ConfigurationError, NameCollisionError, UnmappableTypeError

from .fixtures import TIME_SERIES_DOCUMENT, generate_client, write_document

TIME_SERIES_BODY = {
    'symbol': 'AAPL',
    'interval': '1day',
    'values': [{'datetime': '2024-01-02', 'close': 185.5}],
}


@pytest.fixture
def client(tmp_path, monkeypatch):
    module, _ = generate_client(tmp_path, monkeypatch, TIME_SERIES_DOCUMENT)
    return module


@pytest.fixture
def recorder():
    """Mock transport recording requests and answering by path."""

    class Recorder:
        def __init__(self):
            self.requests: list[httpx.Request] = []
            self.status_code = 200

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if request.url.path == '/ping':
                return httpx.Response(200, json={'status': 'ok'})
            if self.status_code != 200:
                return httpx.Response(
                    self.status_code, json={'code': self.status_code, 'message': 'bad symbol'}
                )
            return httpx.Response(200, json=TIME_SERIES_BODY)

    return Recorder()


@pytest.fixture
def configuration(client, recorder):
    return client.Configuration(client=httpx.Client(transport=httpx.MockTransport(recorder)))


class TestGeneratedFiles:
    """Test the files written by a generation run."""

    def test_generate_creates_files(self, tmp_path):
        source = write_document(tmp_path, TIME_SERIES_DOCUMENT)
        output = tmp_path / 'market'

        result = Codegen(DocumentConfig(source=str(source), output=str(output))).generate()

        assert result.ok
        assert sorted(p.name for p in result.files) == [
            '__init__.py',
            '_runtime.py',
            'endpoints.py',
            'models.py',
        ]
        for name in ('__init__.py', '_runtime.py', 'endpoints.py', 'models.py'):
            assert (output / name).exists()

    def test_custom_filenames(self, tmp_path):
        source = write_document(tmp_path, TIME_SERIES_DOCUMENT)
        output = tmp_path / 'market_custom'
        config = DocumentConfig(
            source=str(source),
            output=str(output),
            models_file='api_models.py',
            endpoints_file='api.py',
        )

        Codegen(config).generate()

        endpoints = (output / 'api.py').read_text()
        assert 'from .api_models import ErrorBody, TimeSeries' in endpoints
        init = (output / '__init__.py').read_text()
        assert 'from .api import' in init

    def test_runtime_base_url(self, tmp_path):
        source = write_document(tmp_path, TIME_SERIES_DOCUMENT)
        output = tmp_path / 'market_url'
        config = DocumentConfig(
            source=str(source), output=str(output), base_url='https://override.example.com'
        )

        Codegen(config).generate()

        assert "BASE_URL = 'https://override.example.com'" in (output / '_runtime.py').read_text()

    def test_missing_base_url(self, tmp_path):
        document = copy.deepcopy(TIME_SERIES_DOCUMENT)
        del document['baseUrl']
        source = write_document(tmp_path, document)

        with pytest.raises(ConfigurationError, match='base_url'):
            Codegen(DocumentConfig(source=str(source), output=str(tmp_path / 'x'))).generate()


class TestOptionsAndBuilders:
    """Test the generated options types and builders."""

    def test_zero_parameter_operation_is_unchanged(self, client):
        assert not hasattr(client, 'PingParams')
        assert not hasattr(client, 'PingParamsBuilder')
        assert list(inspect.signature(client.ping).parameters) == ['configuration']
        assert list(inspect.signature(client.aping).parameters) == ['configuration']

    def test_options_signature(self, client):
        assert list(inspect.signature(client.getTimeSeries).parameters) == [
            'configuration',
            'params',
        ]

    def test_fields_in_declaration_order(self, client):
        assert list(client.GetTimeSeriesParams.model_fields) == [
            'symbol',
            'interval',
            'outputsize',
        ]

    def test_every_field_defaults_to_none(self, client):
        params = client.GetTimeSeriesParams()

        assert params.symbol is None
        assert params.interval is None
        assert params.outputsize is None

    def test_setters_in_declaration_order(self, client):
        setters = [
            name
            for name, value in vars(client.GetTimeSeriesParamsBuilder).items()
            if callable(value) and not name.startswith('_') and name != 'build'
        ]
        assert setters == ['symbol', 'interval', 'outputsize']

    def test_builder_classmethod(self, client):
        builder = client.GetTimeSeriesParams.builder()

        assert isinstance(builder, client.GetTimeSeriesParamsBuilder)

    def test_builder_equivalent_to_direct_construction(self, client):
        built = (
            client.GetTimeSeriesParams.builder()
            .symbol('AAPL')
            .interval('1day')
            .outputsize(5)
            .build()
        )

        assert built == client.GetTimeSeriesParams(symbol='AAPL', interval='1day', outputsize=5)

    @pytest.mark.parametrize('size', [0, 1, 2, 3])
    def test_setter_order_does_not_matter(self, client, size):
        values = {'symbol': 'AAPL', 'interval': '1day', 'outputsize': 5}

        for subset in itertools.combinations(values, size):
            direct = client.GetTimeSeriesParams(**{name: values[name] for name in subset})
            for order in itertools.permutations(subset):
                builder = client.GetTimeSeriesParams.builder()
                for name in order:
                    getattr(builder, name)(values[name])
                built = builder.build()

                assert built == direct

    def test_unset_fields_stay_absent(self, client):
        built = client.GetTimeSeriesParams.builder().symbol('AAPL').build()

        assert built.outputsize is None
        assert built.model_fields_set == {'symbol'}

    def test_last_setter_call_wins(self, client):
        built = client.GetTimeSeriesParams.builder().symbol('MSFT').symbol('AAPL').build()

        assert built.symbol == 'AAPL'

    def test_string_setter_converts_value(self, client):
        built = client.GetTimeSeriesParams.builder().symbol(123).build()

        assert built.symbol == '123'

    def test_builder_is_single_use(self, client):
        builder = client.GetTimeSeriesParams.builder().symbol('AAPL')
        builder.build()

        with pytest.raises(client.BuilderConsumedError):
            builder.symbol('MSFT')
        with pytest.raises(client.BuilderConsumedError):
            builder.build()

    def test_builders_are_independent(self, client):
        first = client.GetTimeSeriesParams.builder().symbol('AAPL')
        second = client.GetTimeSeriesParams.builder().symbol('MSFT')

        assert first.build().symbol == 'AAPL'
        assert second.build().symbol == 'MSFT'

    def test_builder_has_no_instance_dict(self, client):
        builder = client.GetTimeSeriesParams.builder()

        with pytest.raises(AttributeError):
            builder.extra = 1


class TestGeneratedCalls:
    """Test calling the generated endpoint functions."""

    def test_get_time_series(self, client, configuration, recorder):
        params = (
            client.GetTimeSeriesParams.builder()
            .symbol('AAPL')
            .interval('1day')
            .outputsize(5)
            .build()
        )

        result = client.getTimeSeries(configuration, params)

        assert isinstance(result, client.TimeSeries)
        assert result.symbol == 'AAPL'
        assert result.values[0].close == 185.5
        assert result.values[0].datetime_ == '2024-01-02'
        request = recorder.requests[0]
        assert request.method == 'GET'
        assert str(request.url) == (
            'https://api.example.com/time_series?symbol=AAPL&interval=1day&outputsize=5'
        )

    def test_optional_parameter_omitted(self, client, configuration, recorder):
        params = client.GetTimeSeriesParams.builder().symbol('AAPL').interval('1day').build()

        client.getTimeSeries(configuration, params)

        assert dict(recorder.requests[0].url.params) == {'symbol': 'AAPL', 'interval': '1day'}

    def test_builder_and_direct_send_same_request(self, client, configuration, recorder):
        built = client.GetTimeSeriesParams.builder().interval('1h').symbol('MSFT').build()
        direct = client.GetTimeSeriesParams(symbol='MSFT', interval='1h')

        client.getTimeSeries(configuration, built)
        client.getTimeSeries(configuration, direct)

        first, second = recorder.requests
        assert first.url == second.url
        assert first.method == second.method

    def test_missing_required_parameter(self, client, configuration, recorder):
        params = client.GetTimeSeriesParams.builder().interval('1day').build()

        with pytest.raises(client.MissingParameterError) as exc_info:
            client.getTimeSeries(configuration, params)

        assert exc_info.value.parameter == 'symbol'
        assert exc_info.value.operation == 'getTimeSeries'
        assert isinstance(exc_info.value, ValueError)
        assert recorder.requests == []

    def test_ping(self, client, configuration, recorder):
        assert client.ping(configuration) == {'status': 'ok'}
        assert str(recorder.requests[0].url) == 'https://api.example.com/ping'

    def test_api_error(self, client, configuration, recorder):
        recorder.status_code = 400
        params = client.GetTimeSeriesParams(symbol='NOPE', interval='1day')

        with pytest.raises(client.ApiError) as exc_info:
            client.getTimeSeries(configuration, params)

        assert exc_info.value.status_code == 400
        assert isinstance(exc_info.value.entity, client.ErrorBody)
        assert exc_info.value.entity.message == 'bad symbol'

    def test_configuration_headers(self, client, recorder):
        configuration = client.Configuration(
            headers={'Authorization': 'apikey secret'},
            client=httpx.Client(transport=httpx.MockTransport(recorder)),
        )

        client.ping(configuration)

        assert recorder.requests[0].headers['Authorization'] == 'apikey secret'

    def test_async_call(self, client, recorder):
        configuration = client.Configuration(
            async_client=httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        )
        params = client.GetTimeSeriesParams.builder().symbol('AAPL').interval('1day').build()

        result = asyncio.run(client.agetTimeSeries(configuration, params))

        assert result.symbol == 'AAPL'
        assert recorder.requests[0].url.params['symbol'] == 'AAPL'


class TestVariantsAndFailures:
    """Test the flat variant and partial generation."""

    def test_flat_variant(self, tmp_path, monkeypatch, recorder):
        client, _ = generate_client(
            tmp_path, monkeypatch, TIME_SERIES_DOCUMENT, variant=ClientVariant.FLAT
        )

        signature = inspect.signature(client.getTimeSeries)
        assert list(signature.parameters) == ['configuration', 'symbol', 'interval', 'outputsize']
        assert signature.parameters['outputsize'].kind is inspect.Parameter.KEYWORD_ONLY
        assert not hasattr(client, 'GetTimeSeriesParams')

        configuration = client.Configuration(
            client=httpx.Client(transport=httpx.MockTransport(recorder))
        )
        client.getTimeSeries(configuration, 'AAPL', '1day')
        assert dict(recorder.requests[0].url.params) == {'symbol': 'AAPL', 'interval': '1day'}

    def test_failed_operations_are_skipped(self, tmp_path, monkeypatch):
        document = copy.deepcopy(TIME_SERIES_DOCUMENT)
        document['operations'].append(
            {
                'name': 'getQuote',
                'parameters': [
                    {'name': 'symbol', 'in': 'query', 'type': {'$ref': 'Quote'}},
                ],
            }
        )
        document['operations'].append(
            {
                'name': 'TimeSeries',
                'parameters': [{'name': 'symbol', 'in': 'query'}],
            }
        )

        client, result = generate_client(tmp_path, monkeypatch, document)

        assert not result.ok
        failures = {f.operation_name: f.error for f in result.failures}
        assert isinstance(failures['getQuote'], UnmappableTypeError)
        assert isinstance(failures['TimeSeries'], NameCollisionError)
        assert not hasattr(client, 'getQuote')
        assert hasattr(client, 'getTimeSeries')
        assert hasattr(client, 'ping')

    def test_escaped_member_names(self, tmp_path, monkeypatch, recorder):
        document = {
            'title': 'Escapes',
            'baseUrl': 'https://api.example.com',
            'operations': [
                {
                    'name': 'search',
                    'path': '/search',
                    'parameters': [
                        {'name': 'from', 'in': 'query', 'type': {'type': 'string', 'format': 'date'}},
                        {'name': 'params', 'in': 'query', 'type': {'type': 'string'}},
                        {'name': 'json', 'in': 'query', 'type': {'type': 'boolean'}},
                    ],
                }
            ],
        }

        client, result = generate_client(tmp_path, monkeypatch, document)

        assert result.ok
        assert list(client.SearchParams.model_fields) == ['from_', 'params_', 'json_']
        params = (
            client.SearchParams.builder()
            .from_(datetime.date(2024, 1, 2))
            .params_('x')
            .json_(True)
            .build()
        )
        configuration = client.Configuration(
            client=httpx.Client(transport=httpx.MockTransport(recorder))
        )
        client.search(configuration, params)

        assert dict(recorder.requests[0].url.params) == {
            'from': '2024-01-02',
            'params': 'x',
            'json': 'true',
        }


BARS_DOCUMENT = {
    'title': 'Bars',
    'baseUrl': 'https://api.example.com',
    'operations': [
        {
            'name': 'listBars',
            'path': '/bars',
            'parameters': [
                {'name': 'since', 'in': 'query', 'type': {'type': 'string', 'format': 'date-time'}},
                {
                    'name': 'ids',
                    'in': 'query',
                    'type': {'type': 'array', 'items': {'type': 'integer'}},
                    'collectionFormat': 'csv',
                },
                {'name': 'note', 'in': 'query', 'type': {'type': 'string', 'nullable': True}},
            ],
        }
    ],
}


class TestSetterCoercion:
    """Builder setters validate values the way the options constructor does."""

    @pytest.fixture
    def bars(self, tmp_path, monkeypatch):
        module, result = generate_client(tmp_path, monkeypatch, BARS_DOCUMENT)
        assert result.ok
        return module

    def test_datetime_from_iso_string(self, bars):
        built = bars.ListBarsParams.builder().since('2024-01-02T00:00:00').build()

        assert built == bars.ListBarsParams(since='2024-01-02T00:00:00')
        assert built.since == datetime.datetime(2024, 1, 2)

    def test_list_is_validated_on_assignment(self, bars):
        ids = ['1', '2']
        built = bars.ListBarsParams.builder().ids(ids).build()
        ids.append('3')

        assert built.ids == [1, 2]
        assert built == bars.ListBarsParams(ids=['1', '2'])

    def test_invalid_value_is_rejected(self, bars):
        with pytest.raises(ValueError):
            bars.ListBarsParams.builder().since('not a date')

    def test_none_passes_through_string_setter(self, bars, recorder):
        built = bars.ListBarsParams.builder().ids([1]).note(None).build()

        assert built.note is None
        assert built == bars.ListBarsParams(ids=[1], note=None)

        configuration = bars.Configuration(
            client=httpx.Client(transport=httpx.MockTransport(recorder))
        )
        bars.listBars(configuration, built)

        assert dict(recorder.requests[0].url.params) == {'ids': '1'}


def test_unmappable_schema_property_aborts_generation(tmp_path):
    """Models are shared by every operation, so a bad schema fails the run."""
    document = copy.deepcopy(TIME_SERIES_DOCUMENT)
    document['schemas']['Broken'] = {'properties': {'items': {'type': 'array'}}}
    source = write_document(tmp_path, document)
    output = tmp_path / 'broken_client'

    with pytest.raises(UnmappableTypeError) as exc_info:
        Codegen(DocumentConfig(source=str(source), output=str(output))).generate()

    assert exc_info.value.operation_name == 'Broken'
    assert not (output / 'endpoints.py').exists()
