import pytest

from config.registry import COLLECTIONS, collections_by_group, get_collection
from core.csv_ingest import IngestOptions, ingest_csv


def test_keys_are_unique():
    keys = [d.key for d in COLLECTIONS]
    assert len(keys) == len(set(keys))


def test_every_collection_has_required_fields():
    for definition in COLLECTIONS:
        assert definition.schema.required_fields, definition.key
        assert definition.endpoint.startswith("/"), definition.key


def test_attachment_fields_exist_in_schema():
    for definition in COLLECTIONS:
        for field_name in definition.attachments:
            assert field_name in definition.schema.field_names


def test_groups_keep_registry_order():
    groups = collections_by_group()
    assert sum(len(v) for v in groups.values()) == len(COLLECTIONS)
    assert [d.key for d in groups["Assets"]] == ["ips", "domains", "attack_surface"]


def test_get_collection():
    assert get_collection("iocs").noun == "IOC entries"
    with pytest.raises(KeyError):
        get_collection("nope")


def test_ip_import():
    definition = get_collection("ips")
    text = "value,location,description\n10.0.0.1,HQ,core switch\n10.0.0.300,HQ,\n10.0.0.1,DC,\n"
    result = ingest_csv(text, IngestOptions(schema=definition.schema))
    assert result.valid_count == 1
    assert [e.line for e in result.errors] == [3, 4]


def test_domain_pattern():
    schema = get_collection("domains").schema
    assert schema.validate({"value": "mail.example.com", "location": "HQ"})
    assert not schema.validate({"value": "not a domain", "location": "HQ"})


def test_template_round_trips_through_ingest():
    for definition in COLLECTIONS:
        result = ingest_csv(definition.csv_template, IngestOptions(schema=definition.schema))
        assert result.headers == definition.schema.field_names
        assert result.rows == []
