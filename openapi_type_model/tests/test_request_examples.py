import json
import logging
from pathlib import Path

import pytest

from openapi_type_model.pipeline import document_definitions, document_parameters, iter_operations
from openapi_type_model.pipeline.config import ConversionConfig
from openapi_type_model.pipeline.examples import (
    ExampleGenerator,
    RequestExampleBuilder,
    ResponseExampleBuilder,
    encode_example_for_url,
    parameter_schema,
)
from openapi_type_model.pipeline.schema_ast import SchemaNormalizer

TEST_DATA = Path(__file__).parent / "test_data"

FULL_PET = {"id": 0, "name": "string", "tag": "string"}


def load_document(file_name):
    with open(TEST_DATA / file_name) as f:
        return json.load(f)


def operations_by_id(document):
    return {operation.id: operation for operation in iter_operations(document["paths"])}


def make_builders(document, **config):
    generator = ExampleGenerator(SchemaNormalizer(document_definitions(document)), ConversionConfig(**config))
    request = RequestExampleBuilder(generator, parameter_definitions=document_parameters(document))
    return request, ResponseExampleBuilder(generator)


@pytest.fixture
def petstore():
    return load_document("petstore.json")


@pytest.fixture
def store():
    return load_document("swagger2_store.json")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("hello world", "hello+world"),
        ("a/b", "a%2Fb"),
        (True, "true"),
        (0, "0"),
        (["a", "b"], "%5B%22a%22%2C+%22b%22%5D"),
    ],
)
def test_encode_example_for_url(value, expected):
    assert encode_example_for_url(value) == expected


def test_parameter_schema():
    assert parameter_schema({"name": "a", "in": "query", "schema": {"type": "integer"}}) == {"type": "integer"}
    assert parameter_schema({"name": "a", "in": "query", "type": "array", "items": {"type": "string"}}) == {
        "type": "array",
        "items": {"type": "string"},
    }


class TestOpenApi3Requests:
    def test_path_query_and_header(self, petstore):
        request, _ = make_builders(petstore, generated_examples_enabled=True)
        operation = operations_by_id(petstore)["getPet"]

        assert request.build(operation) == {
            "path": "/pets/0?fields=string",
            "header": 'X-Request-Id:"string"',
        }

    def test_optional_query_parameters(self, petstore):
        request, _ = make_builders(
            petstore,
            generated_examples_enabled=True,
            generated_optional_query_parameter_example_enabled=True,
        )
        operation = operations_by_id(petstore)["getPet"]

        assert request.build(operation)["path"] == "/pets/0?verbose=true&fields=string"

    def test_nothing_without_generation(self, petstore):
        request, _ = make_builders(petstore)
        assert request.build(operations_by_id(petstore)["getPet"]) == {}

    def test_request_body(self, petstore):
        request, _ = make_builders(petstore, generated_examples_enabled=True)
        operation = operations_by_id(petstore)["createPet"]

        assert request.build(operation) == {
            "path": "/pets",
            "body": {"name": "string", "owner": {"email": "email@example.com"}},
        }

    def test_authored_request_body_example(self, petstore):
        request, _ = make_builders(petstore)
        operation = operations_by_id(petstore)["createPet"]
        operation.operation["requestBody"]["content"]["application/json"]["example"] = {"name": "Rex"}

        assert request.build(operation) == {"body": {"name": "Rex"}}


class TestOpenApi3Responses:
    def test_generated(self, petstore):
        _, response = make_builders(petstore, generated_examples_enabled=True)
        operations = operations_by_id(petstore)

        assert response.build(operations["getPet"]) == {"200": FULL_PET}
        assert response.build(operations["createPet"]) == {"201": {"id": 0}, "400": {"message": "invalid"}}

    def test_authored_only(self, petstore):
        _, response = make_builders(petstore)
        operations = operations_by_id(petstore)

        assert response.build(operations["getPet"]) == {}
        assert response.build(operations["createPet"]) == {"400": {"message": "invalid"}}


class TestSwagger2Requests:
    def test_body_and_query(self, store):
        request, _ = make_builders(store, generated_examples_enabled=True)

        assert request.build(operations_by_id(store)["addItem"]) == {
            "path": "/items?q=hello+world&limit=0",
            "header": 'X-Tenant:"integer"',
            "body": {"sku": "A1"},
        }

    def test_authored_body_without_generation(self, store):
        request, _ = make_builders(store)
        assert request.build(operations_by_id(store)["addItem"]) == {"body": {"sku": "A1"}}

    def test_optional_array_query_parameter(self, store):
        request, _ = make_builders(
            store,
            generated_examples_enabled=True,
            generated_optional_query_parameter_example_enabled=True,
        )
        assert request.build(operations_by_id(store)["addItem"])["path"] == "/items?q=hello+world&limit=0&tags=string"

    def test_path_parameter_is_encoded(self, store, caplog):
        request, _ = make_builders(store, generated_examples_enabled=True)

        with caplog.at_level(logging.WARNING):
            examples = request.build(operations_by_id(store)["deleteItem"])

        assert examples == {"path": "/items/a%2Fb", "formData": "string"}
        assert "#/parameters/Missing" in caplog.text


class TestSwagger2Responses:
    def test_examples_and_referenced_example(self, store):
        _, response = make_builders(store)

        assert response.build(operations_by_id(store)["addItem"]) == {
            "200": {"sku": "A1"},
            "500": {"application/json": {"error": "x"}},
        }

    def test_response_without_schema(self, store):
        _, response = make_builders(store, generated_examples_enabled=True)
        assert response.build(operations_by_id(store)["deleteItem"]) == {}
