import pytest
from backend.core.normalize import normalize


@pytest.mark.unit
class TestNormalize:
    """Tests for the normalize function."""

    def test_expand_abbreviations(self):
        """Abbreviations are expanded before qualifiers are stripped."""
        assert normalize("db bench press", strip_qualifiers=False) == "dumbbell bench press"
        assert normalize("bb squat", strip_qualifiers=False) == "barbell squat"
        assert normalize("ohp") == "overhead press"

    def test_equipment_words_stripped(self):
        """Bare equipment words are dropped for matching."""
        assert normalize("DB Bench Press") == "bench press"
        assert normalize("Barbell Bench Press") == "bench press"

    def test_qualifier_phrases_stripped(self):
        """'with barbell' / 'on machine' style qualifiers are removed."""
        assert normalize("Squat with barbell") == "squat"
        assert normalize("Leg Press on machine") == "leg press"

    def test_remove_separators(self):
        """Separators are converted to spaces."""
        assert normalize("push-up") == "push up"
        assert normalize("push_up") == "push up"
        assert normalize("push/up") == "push up"

    def test_remove_special_characters(self):
        """Punctuation is removed."""
        assert normalize("bench press!") == "bench press"

    def test_plural_to_singular(self):
        """Common plurals are singularized."""
        assert normalize("Lateral Raises") == "lateral raise"
        assert normalize("Push-ups") == "push up"
        assert normalize("Dumbbell Flyes") == "fly"

    def test_warmup_marker_dropped(self):
        """A leading warm-up marker is not part of the name."""
        assert normalize("Warm-up: Bench Press") == "bench press"
        assert normalize("Разминка: Жим лёжа") == "жим лежа"

    def test_russian_names(self):
        """Cyrillic names fold ё and drop equipment qualifiers."""
        assert normalize("Жим штанги лёжа") == "жим лежа"
        assert normalize("Жим гантелей лёжа") == "жим лежа"

    def test_case_insensitive(self):
        """Normalization is case insensitive."""
        assert normalize("DB BENCH PRESS") == normalize("Dumbbell Bench Press")

    def test_empty_string(self):
        """Empty or missing input returns an empty string."""
        assert normalize("") == ""
        assert normalize(None) == ""

    def test_whitespace_only(self):
        """Whitespace-only strings return empty string."""
        assert normalize("   ") == ""
        assert normalize("\t\n") == ""
