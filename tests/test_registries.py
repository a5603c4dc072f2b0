import json
from pathlib import Path

import pytest

from eventscope.abi_events import (
    get_events_from_abi,
    make_event_registry_from_abi,
    parse_schema,
    register_schema,
    schemas_from_abi,
)
from eventscope.constants import TRANSFER_T0
from eventscope.decoding.registries import (
    make_commitment_store_registry,
    make_erc20_registry,
    make_erc721_registry,
)
from eventscope.decoding.registry import make_registry
from eventscope.decoding.registry_builder import schema_from_signature
from eventscope.decoding.types import Address, FixedBytes, Uint
from eventscope.errors import SchemaError

TRANSFER = "Transfer(address indexed from, address indexed to, uint256 value)"
NFT_TRANSFER = "Transfer(address indexed from, address indexed to, uint256 indexed tokenId)"


def test_make_erc20_registry():
    registry = make_erc20_registry()
    assert len(registry) == 2
    assert registry[TRANSFER_T0].name == "Transfer"


def test_make_erc721_registry():
    registry = make_erc721_registry()
    assert len(registry) == 3
    assert registry[TRANSFER_T0].num_indexed == 3


def test_make_commitment_store_registry():
    registry = make_commitment_store_registry()
    (schema,) = registry.values()
    assert schema.name == "CommitmentStored"
    assert [f.name for f in schema.indexed_fields] == ["commitmentIndex"]
    assert len(schema.data_fields) == 14


def test_make_event_registry_from_abi(commitment_abi_path: Path):
    assert commitment_abi_path.is_file()
    registry = make_event_registry_from_abi(commitment_abi_path)
    events = get_events_from_abi(commitment_abi_path)
    assert len(registry) == 3  # constructor and function entries are ignored
    assert len(registry) == len(events)
    assert {s.name for s in registry.values()} == set(events)


def test_registry_from_abi_matches_signature_registry(commitment_abi_path: Path):
    from_abi = make_event_registry_from_abi(commitment_abi_path, ["CommitmentStored"])
    from_sig = make_commitment_store_registry()
    assert from_abi.keys() == from_sig.keys()
    (a,), (b,) = from_abi.values(), from_sig.values()
    assert a == b


def test_abi_accepts_json_text_and_artifact_wrapper(commitment_abi_path: Path):
    text = commitment_abi_path.read_text()
    artifact = {"contractName": "PreConfCommitmentStore", "abi": json.loads(text)}
    assert make_event_registry_from_abi(text).keys() == make_event_registry_from_abi(artifact).keys()


def test_schemas_from_abi_missing_event(commitment_abi_path: Path):
    with pytest.raises(SchemaError, match="NotThere"):
        schemas_from_abi(commitment_abi_path, ["CommitmentStored", "NotThere"])


def test_topic0_collision_is_rejected():
    with pytest.raises(SchemaError, match="collision"):
        make_registry([TRANSFER, NFT_TRANSFER])
    with pytest.raises(SchemaError):
        make_erc20_registry() | make_erc721_registry()


def test_identical_schema_registered_twice_is_noop():
    registry = make_registry([TRANSFER, TRANSFER])
    assert len(registry) == 1
    assert len(make_erc20_registry() | make_erc20_registry()) == 2


def test_merge_keeps_both_sides():
    merged = make_erc20_registry() | make_commitment_store_registry()
    assert len(merged) == 3
    assert {s.name for s in merged.values()} == {"Transfer", "Approval", "CommitmentStored"}


def test_registry_lookup_by_hex_and_bytes():
    registry = make_erc20_registry()
    schema = registry[TRANSFER_T0]
    assert registry[schema.signature_hash] is schema
    assert registry.get(TRANSFER_T0.upper().replace("0X", "0x")) is schema
    assert registry.get("0xnothex") is None
    assert registry.get(b"\x00" * 32) is None
    assert TRANSFER_T0 in registry.topic0s()


def test_registry_is_read_only():
    registry = make_erc20_registry()
    with pytest.raises(TypeError):
        registry[b"\x00" * 32] = registry[TRANSFER_T0]  # type: ignore[index]


def test_too_many_indexed_fields():
    with pytest.raises(SchemaError, match="indexed"):
        schema_from_signature("Big(uint8 indexed a, uint8 indexed b, uint8 indexed c, uint8 indexed d)")


def test_duplicate_field_names():
    with pytest.raises(SchemaError, match="duplicate"):
        schema_from_signature("Dup(uint8 a, uint8 a)")


def test_unknown_and_unsupported_types():
    with pytest.raises(SchemaError):
        schema_from_signature("Bad(uint7 a)")
    with pytest.raises(SchemaError, match="unsupported"):
        schema_from_signature("Pair((uint256,address) pair, uint8 b)")


def test_anonymous_events_are_rejected():
    with pytest.raises(SchemaError):
        schema_from_signature("event Ping(uint256 n) anonymous;")
    with pytest.raises(SchemaError):
        parse_schema({"type": "event", "name": "Ping", "anonymous": True, "inputs": []})


def test_parse_schema_missing_name():
    with pytest.raises(SchemaError, match="malformed"):
        parse_schema({"type": "event", "inputs": []})


def test_parse_schema_not_an_event():
    with pytest.raises(SchemaError):
        parse_schema({"type": "function", "name": "transfer", "inputs": []})


def test_unnamed_parameters_get_positional_names():
    schema = schema_from_signature("Transfer(address indexed, address indexed, uint256)")
    assert [f.name for f in schema.fields] == ["arg0", "arg1", "arg2"]
    assert schema.topic0 == TRANSFER_T0

    schema = parse_schema(
        {"type": "event", "name": "Deposit", "inputs": [{"type": "address", "indexed": True}, {"type": "uint256"}]}
    )
    assert [f.name for f in schema.fields] == ["arg0", "arg1"]


def test_register_schema_input_forms():
    entry = {
        "type": "event",
        "name": "Transfer",
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    }
    from_dict = register_schema(entry)
    from_json = register_schema(json.dumps(entry))
    from_sig = register_schema(TRANSFER)
    assert from_dict == from_json == from_sig
    assert from_dict.signature == "Transfer(address,address,uint256)"
    assert [f.type for f in from_dict.fields] == [Address(), Address(), Uint()]
    assert [f.name for f in from_dict.indexed_fields] == ["from", "to"]


def test_register_schema_bad_json():
    with pytest.raises(SchemaError):
        register_schema('{"type": "event", ')


def test_event_without_fields():
    schema = register_schema("Paused()")
    assert schema.fields == ()
    assert schema.signature == "Paused()"


def test_commitment_index_is_fixed_bytes(commitment_abi_path: Path):
    (schema,) = schemas_from_abi(commitment_abi_path, ["CommitmentStored"])
    assert schema.fields[0].type == FixedBytes(32)
    assert schema.fields[0].indexed


@pytest.mark.parametrize(
    "signature",
    [
        "Foo(uint256,,bool)",
        "Foo(uint256,)",
        "Foo(,uint256)",
        "Foo(uint256 a) trailing garbage",
        "Foo(uint256 a) indexed",
        "Foo(uint256 a))",
        "(uint256 a)",
        "1Foo(uint256 a)",
        "Foo Bar(uint256 a)",
        "Foo(uint256 a-b)",
    ],
)
def test_malformed_signatures_are_rejected(signature: str):
    with pytest.raises(SchemaError):
        schema_from_signature(signature)


def test_lenient_signature_forms():
    assert schema_from_signature("Foo()").signature == "Foo()"
    assert schema_from_signature("Foo( )").signature == "Foo()"
    assert schema_from_signature("event $Foo_1(uint256 _a, bool b$);").signature == "$Foo_1(uint256,bool)"
