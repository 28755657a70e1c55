import json

import pytest

from catalog import ProductStore


@pytest.fixture
def product_file(tmp_path):
    return tmp_path / "products.json"


@pytest.fixture
def store(product_file):
    return ProductStore(product_file)


@pytest.fixture
def sample():
    return {
        "title": "Producto Prueba",
        "description": "Este es un producto de prueba",
        "price": 200,
        "thumbnail": "Sin imagen",
        "code": "abc123",
        "stock": 25,
    }


@pytest.fixture
def seed(product_file):
    def _seed(records):
        product_file.write_text(json.dumps(records, indent=2), encoding="utf-8")
        return product_file.read_bytes()

    return _seed
