"generic fixtures"

import pytest

from attrcomplete.completions import CompletionContext
from attrcomplete.logging_setup import get_logger, init_logger
from attrcomplete.registry import AliasStore, HeaderCatalog, ResourceRegistry
from attrcomplete.settings import default_settings

RESOURCE_DEFINITIONS = {
    "accounts": {
        "singular-name": "account",
        "json-api-type": "account",
        "get-entity": {"url": "/v2/accounts/{accounts}", "query": [{"name": "include"}]},
        "get-collection": {"url": "/v2/accounts", "query": [{"name": "filter"}, {"name": "page[limit]"}]},
        "create-entity": {"url": "/v2/accounts"},
        "update-entity": {"url": "/v2/accounts/{accounts}"},
        "delete-entity": {"url": "/v2/accounts/{accounts}"},
        "attributes": {
            "name": {"type": "STRING"},
            "legal_name": {"type": "STRING"},
            "registration_id": {"type": "STRING"},
            "parent_id": {"type": "RESOURCE_ID:accounts"},
        },
    },
    "customers": {
        "singular-name": "customer",
        "json-api-type": "customer",
        "get-entity": {"url": "/v2/customers/{customers}"},
        "get-collection": {"url": "/v2/customers"},
        "create-entity": {"url": "/v2/customers"},
        "attributes": {
            "name": {"type": "STRING"},
            "email": {"type": "STRING"},
            "status": {"type": "ENUM:live,draft"},
        },
    },
    "password-profiles": {
        "singular-name": "password-profile",
        "json-api-type": "password_profile",
        "create-entity": {"url": "/v2/password-profiles"},
        "attributes": {
            "username_format": {"type": "ENUM:any,email"},
            "enable_one_time_password_token": {"type": "BOOL"},
        },
    },
    "pcm-products": {
        "singular-name": "pcm-product",
        "json-api-type": "product",
        "alternate-json-type-for-aliases": ["pcm-product"],
        "get-entity": {"url": "/pcm/products/{pcm_products}"},
        "get-collection": {"url": "/pcm/products"},
        "create-entity": {"url": "/pcm/products"},
        "delete-entity": {"url": "/pcm/products/{pcm_products}"},
        "attributes": {
            "name": {"type": "STRING"},
            "sku": {"type": "STRING"},
            "slug": {"type": "STRING"},
            "status": {"type": "ENUM:live,draft"},
            "^custom_inputs\\.([a-zA-Z0-9-_]+)\\.name$": {"type": "STRING"},
            "^custom_inputs\\.([a-zA-Z0-9-_]+)\\.validation_rules\\[n\\]\\.required$": {"type": "BOOL"},
            "^components\\.([a-zA-Z0-9-_]+)\\.min$": {"type": "STRING"},
            "^components\\.([a-zA-Z0-9-_]+)\\.options\\.id\\[n\\]$": {"type": "RESOURCE_ID:pcm-products"},
            "^components\\.([a-zA-Z0-9-_]+)\\.options\\.type$": {"type": "JSON_API_TYPE"},
        },
    },
    "rule-promotions": {
        "singular-name": "rule-promotion",
        "json-api-type": "rule_promotion",
        "create-entity": {"url": "/v2/rule-promotions"},
        "attributes": {
            "name": {"type": "STRING"},
            "rule_set.rules.children[n].args[n]": {"type": "STRING"},
        },
    },
    "product-attributes": {
        "singular-name": "product-attribute",
        "json-api-type": "product_attribute",
        "create-entity": {"url": "/v2/product-attributes"},
        "update-entity": {"url": "/v2/product-attributes/{product_attributes}"},
        "attributes": {
            "field_type": {"type": "ENUM:string,integer,float"},
            "validation.integer.max_value": {"type": "STRING", "when": "field_type == 'integer'"},
            "validation.string.regex": {"type": "STRING", "when": "field_type == 'string'"},
            "validation.number.precision": {"type": "STRING", "conditions": ["field_type == 'integer'", "field_type == 'float'"]},
        },
    },
    "orders": {
        "singular-name": "order",
        "json-api-type": "order",
        "create-entity": {"url": "/v2/orders"},
        "attributes": {
            "items[n].type": {"type": "ENUM:cart_item,custom_item"},
            "items[n].sku": {"type": "STRING", "when": "items[n].type == 'custom_item'"},
            "items[n].quantity": {"type": "STRING"},
            "shipping.method": {"type": "STRING"},
            "shipping.tracking_url": {"type": "URL", "when": "shipping.method != nil"},
        },
    },
    "files": {
        "singular-name": "file",
        "json-api-type": "file",
        "create-entity": {"url": "/v2/files"},
        "attributes": {
            "file": {"type": "FILE"},
            "public": {"type": "BOOL"},
            "currency": {"type": "CURRENCY"},
        },
    },
    "entries": {
        "singular-name": "entry",
        "json-api-type": "entry",
        "create-entity": {"url": "/v2/flows/{flows}/entries"},
        "attributes": {
            "target_id": {"type": "RESOURCE_ID:*"},
            "kind": {"type": "SINGULAR_RESOURCE_TYPE"},
        },
    },
}


def pytest_configure():
    "Runs once before all"
    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger():
    "A logger for objects requiring one"
    return get_logger("tests")


@pytest.fixture
def registry(test_logger):
    "Registry holding the sample resources"
    loaded, errors = ResourceRegistry.from_definitions(RESOURCE_DEFINITIONS, test_logger)
    assert errors == []
    return loaded


@pytest.fixture
def alias_store():
    "Alias store with a few aliases"
    return AliasStore(
        {
            "account": ["name=acme", "name=globex"],
            "product": ["sku=dogbed"],
            "pcm-product": ["sku=catbed"],
        }
    )


@pytest.fixture
def context(registry, alias_store, test_logger):
    "Completion context over the sample resources, spaces left unescaped"
    settings = default_settings(test_logger)
    settings["escape_spaces"] = False
    return CompletionContext(
        registry=registry,
        aliases=alias_store,
        headers=HeaderCatalog(),
        settings=settings,
        environ={"HOME": "/home/me", "STORE_ID": "1"},
        logger=test_logger,
    )
