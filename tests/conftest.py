import pytest

from dependencies import DependencyCollector, RequiredSet
from type_catalog import TypeCatalog
from type_mapper import TypeMapper


@pytest.fixture
def catalog():
    return TypeCatalog()


@pytest.fixture
def required():
    return RequiredSet()


@pytest.fixture
def collector(catalog, required):
    return DependencyCollector(catalog, required)


@pytest.fixture
def mapper(catalog, collector):
    return TypeMapper(catalog, collector)
