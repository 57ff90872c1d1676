"""Tests for the versioned keyword dictionary."""

import pytest

from services.skill_dictionary import (
    SkillDictionary,
    SkillDictionaryError,
    get_default_dictionary,
    load_dictionary,
)
from services.text_normalization import normalize_text


class TestBundledDictionary:
    def test_loads_with_version(self, dictionary):
        assert dictionary.version
        assert dictionary.locale == "fr"
        assert len(dictionary) > 100

    def test_lookup_is_case_and_accent_insensitive(self, dictionary):
        assert dictionary.lookup("C++").slug == "cpp"
        assert dictionary.lookup("Power BI").slug == "power-bi"
        assert dictionary.lookup("Données de référence").slug == "master-data"

    def test_aliases_share_descriptor_fields(self, dictionary):
        assert dictionary.lookup("node.js").slug == dictionary.lookup("nodejs").slug == "nodejs"
        assert dictionary.lookup("k8s").display_name == "Kubernetes"

    def test_context_rules_attached_to_ambiguous_keywords_only(self, dictionary):
        assert dictionary.is_ambiguous("c++")
        assert dictionary.is_ambiguous("c#")
        assert dictionary.is_ambiguous("ssis")
        assert dictionary.is_ambiguous("tableau")
        assert dictionary.is_ambiguous("teams")
        assert not dictionary.is_ambiguous("microsoft teams")
        assert not dictionary.is_ambiguous("python")

    def test_base_descriptor_has_no_rule(self, dictionary):
        assert dictionary.get("cpp").context_rule is None
        assert dictionary.lookup("c++").context_rule is not None

    def test_entries_longest_first(self, dictionary):
        lengths = [len(e.keyword) for e in dictionary.entries]
        assert lengths == sorted(lengths, reverse=True)

    def test_rule_indicators_are_normalized(self, dictionary):
        rule = dictionary.rule_for("c++")
        assert "developpeur" in rule.positive
        assert "reseau" in rule.negative
        for indicator in rule.positive + rule.negative:
            assert indicator == normalize_text(indicator)

    def test_triggers_compiled(self, dictionary):
        assert dictionary.required_triggers
        assert dictionary.optional_triggers
        assert all(w in (4, 5) for _, w in dictionary.required_triggers)
        assert all(w in (2, 3) for _, w in dictionary.optional_triggers)

    def test_unknown_keyword(self, dictionary):
        assert dictionary.lookup("cobol-77") is None
        assert dictionary.rule_for("cobol-77") is None
        assert "cobol" not in dictionary


class TestFromDocument:
    def test_builds_mini_dictionary(self, mini_dictionary):
        assert mini_dictionary.version == "test-1"
        assert mini_dictionary.slugs == frozenset({"python", "cpp", "docker", "power-bi"})
        assert mini_dictionary.is_ambiguous("cpp") is False
        assert mini_dictionary.is_ambiguous("c++") is True

    def test_keyword_mapped_to_two_slugs(self, mini_document):
        mini_document["skills"].append(
            {"slug": "python3", "display_name": "Python 3", "keywords": ["Python"]}
        )
        with pytest.raises(SkillDictionaryError, match="maps to both"):
            SkillDictionary.from_document(mini_document)

    def test_duplicate_slug(self, mini_document):
        mini_document["skills"].append({"slug": "docker", "display_name": "Docker", "keywords": ["moby"]})
        with pytest.raises(SkillDictionaryError, match="duplicate skill slug"):
            SkillDictionary.from_document(mini_document)

    def test_rule_for_unknown_keyword(self, mini_document):
        mini_document["context_rules"]["rust"] = {"positive": ["logiciel"], "negative": []}
        with pytest.raises(SkillDictionaryError, match="unknown keywords"):
            SkillDictionary.from_document(mini_document)

    def test_trigger_weight_out_of_range(self, mini_document):
        mini_document["segment_triggers"]["optional"]["un plus"] = 5
        with pytest.raises(SkillDictionaryError, match="expected 2..3"):
            SkillDictionary.from_document(mini_document)

    def test_schema_violation(self, mini_document):
        del mini_document["version"]
        with pytest.raises(SkillDictionaryError):
            SkillDictionary.from_document(mini_document)

    def test_skill_without_keywords(self, mini_document):
        mini_document["skills"].append({"slug": "empty", "display_name": "Empty", "keywords": []})
        with pytest.raises(SkillDictionaryError):
            SkillDictionary.from_document(mini_document)

    def test_not_a_mapping(self):
        with pytest.raises(SkillDictionaryError, match="mapping"):
            SkillDictionary.from_document(["not", "a", "mapping"])

    def test_error_is_a_value_error(self):
        assert issubclass(SkillDictionaryError, ValueError)


class TestLoading:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "dict.yaml"
        path.write_text(
            "version: '2'\n"
            "skills:\n"
            "  - {slug: electronique, display_name: Électronique, keywords: [Électronique]}\n",
            encoding="utf-8",
        )
        loaded = load_dictionary(path)
        assert loaded.version == "2"
        assert loaded.lookup("electronique").display_name == "Électronique"
        assert loaded.source == str(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SkillDictionaryError, match="cannot read"):
            load_dictionary(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("version: [unclosed\n", encoding="utf-8")
        with pytest.raises(SkillDictionaryError, match="invalid YAML"):
            load_dictionary(path)

    def test_default_dictionary_is_cached(self):
        assert get_default_dictionary() is get_default_dictionary()

    def test_default_dictionary_missing_path(self, tmp_path):
        with pytest.raises(SkillDictionaryError):
            get_default_dictionary(tmp_path / "nope.yaml")
