import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from w2w.translations import EN_TRANSLATIONS, ES_TRANSLATIONS, Translator, weekday_key


def test_both_languages_have_the_same_keys():
    assert set(EN_TRANSLATIONS) == set(ES_TRANSLATIONS)


def test_lookup_in_active_language():
    assert Translator("en").t("schedule.generate") == "Generate Schedule"
    assert Translator("es").t("schedule.generate") == "Generar Horario"


def test_missing_key_renders_as_key():
    assert Translator("es").t("does.not.exist") == "does.not.exist"


def test_shift_labels():
    translator = Translator("es")
    assert translator.shift_label("morning") == "Mañana"
    assert translator.shift_label("off") == "Libre"


def test_weekday_keys_start_on_sunday():
    assert weekday_key(0) == "days.sunday"
    assert weekday_key(6) == "days.saturday"


def test_unknown_language_is_rejected():
    with pytest.raises(ValueError):
        Translator("fr")
