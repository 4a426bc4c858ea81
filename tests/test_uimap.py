import json
from pathlib import Path

import pytest

from coem.coem_constants import CANONICAL_KEYWORDS, TokenType
from coem.coem_errors import MappingError
from coem.coem_uimap import KeywordMapper


def test_from_canonical_knows_every_keyword() -> None:
    mapper = KeywordMapper.from_canonical()
    for word, expected in CANONICAL_KEYWORDS.items():
        assert mapper.get_type(word) == expected
    assert mapper.get_type("banana") is None


def test_dict_mode_basic() -> None:
    mapper = KeywordMapper()
    mapper.configure({"shout": "SAY", "sea": "BE"})
    assert mapper.token_map["shout"] == TokenType.SAY
    assert mapper.token_map["sea"] == TokenType.BE


def test_alias_groups() -> None:
    mapper = KeywordMapper()
    mapper.configure({("shout", "yell"): "SAY", ("si",): "IF"})
    assert mapper.get_type("yell") == TokenType.SAY
    assert mapper.get_type("si") == TokenType.IF


def test_alias_conflict_raises_and_applies_nothing() -> None:
    mapper = KeywordMapper.from_canonical()
    with pytest.raises(MappingError) as e:
        mapper.configure({"fresh": "SAY", "say": "PRINT"})
    assert "Alias collision" in str(e.value)
    assert e.value.conflicts == ["'say' → conflict between SAY and PRINT"]
    assert mapper.get_type("fresh") is None


def test_same_alias_same_type_is_not_a_conflict() -> None:
    mapper = KeywordMapper.from_canonical()
    mapper.configure({"say": "SAY"})
    assert mapper.get_type("say") == TokenType.SAY


def test_unknown_token_name_raises() -> None:
    with pytest.raises(MappingError, match="Unknown token type name"):
        KeywordMapper().configure({"foo": "NOT_A_TOKEN"})


def test_non_keyword_target_raises() -> None:
    with pytest.raises(MappingError, match="cannot be spelled by a keyword"):
        KeywordMapper().configure({"dash": "EM_DASH"})


def test_non_dict_configuration_raises() -> None:
    with pytest.raises(MappingError, match="must be a dict"):
        KeywordMapper().configure([["say"]])  # type: ignore[arg-type]


def test_load_from_json(tmp_path: Path) -> None:
    path = tmp_path / "spanish.json"
    path.write_text(json.dumps({"dire, decir": "SAY", "sea": "BE"}), encoding="utf-8")
    mapper = KeywordMapper.from_canonical()
    mapper.load_from_json(str(path))
    assert mapper.get_type("decir") == TokenType.SAY
    assert mapper.session_diff() == {"dire": "SAY", "decir": "SAY", "sea": "BE"}


def test_load_from_json_missing_file(tmp_path: Path) -> None:
    with pytest.raises(MappingError, match="Failed to load keyword file"):
        KeywordMapper().load_from_json(str(tmp_path / "nope.json"))


def test_load_from_json_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(MappingError, match="Failed to load keyword file"):
        KeywordMapper().load_from_json(str(path))


def test_load_from_json_not_an_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(MappingError, match="JSON object"):
        KeywordMapper().load_from_json(str(path))


def test_report_and_summary() -> None:
    mapper = KeywordMapper()
    mapper.configure({"yell": "SAY"})
    assert mapper.report() == "        yell → SAY"
    assert mapper.summary() == {"yell": "SAY"}
