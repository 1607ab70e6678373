import json
import pytest
from bitflag.core.flags import FlagSet
from bitflag.core.errors import InvalidMapping, UnknownFlag, ValidationError
from bitflag.system.export import FlagSetEncoder, dumps, from_export, load_mapping

MAPPING = {"nice": 1, "cats": 2, "code": 4}

def test_full_export_is_json_object():
    flags = FlagSet(3, MAPPING)
    assert json.loads(dumps(flags)) == {"nice": True, "cats": True, "code": False}
    assert dumps(flags) == '{"nice": true, "cats": true, "code": false}'

def test_active_export():
    flags = FlagSet(6, MAPPING)
    assert json.loads(dumps(flags, active=True)) == {"cats": 2, "code": 4}

def test_encoder_embeds_flagsets():
    doc = {"status": FlagSet(4, MAPPING)}
    assert json.loads(json.dumps(doc, cls=FlagSetEncoder)) == {"status": {"nice": False, "cats": False, "code": True}}
    with pytest.raises(TypeError):
        json.dumps({"x": object()}, cls=FlagSetEncoder)

def test_from_export_accepts_both_shapes():
    full = from_export({"nice": True, "cats": False, "code": True}, MAPPING)
    assert full.to_int() == 5
    active = from_export({"cats": 2, "code": 4}, MAPPING)
    assert active.to_int() == 6

def test_from_export_rejects_stale_or_unknown_entries():
    with pytest.raises(ValidationError):
        from_export({"cats": 8}, MAPPING)
    with pytest.raises(ValidationError):
        from_export({"cats": "yes"}, MAPPING)
    with pytest.raises(UnknownFlag):
        from_export({"dogs": True}, MAPPING)
    assert from_export({"dogs": True}, MAPPING, strict=False).to_int() == 0

def test_load_mapping(tmp_path):
    path = tmp_path / "options.json"
    path.write_text('{"nice": 1, "cats": 2, "code": 4}')
    assert list(load_mapping(path).items()) == [("nice", 1), ("cats", 2), ("code", 4)]

def test_load_mapping_errors(tmp_path):
    with pytest.raises(InvalidMapping):
        load_mapping(tmp_path / "nope.json")
    path = tmp_path / "list.json"
    path.write_text("[1, 2]")
    with pytest.raises(InvalidMapping):
        load_mapping(path)

def test_load_mapping_rejects_repeated_names(tmp_path):
    """A name declared twice in an options file is an error, not a silent overwrite."""
    path = tmp_path / "options.json"
    path.write_text('{"nice": 1, "nice": 2}')
    with pytest.raises(InvalidMapping):
        load_mapping(path)

def test_load_mapping_rejects_nested_objects(tmp_path):
    path = tmp_path / "options.json"
    path.write_text('{"nice": {"bit": 1}}')
    with pytest.raises(InvalidMapping):
        load_mapping(path)
