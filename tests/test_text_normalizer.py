from core.text_normalizer import common_words, count_words, normalize, tokens


def test_normalize_strips_accents_case_and_punctuation():
    assert normalize("Diseñar la Estrategia de Ejecución!") == "disenar la estrategia de ejecucion"
    assert normalize("  Ventas, 25%  ") == "ventas  25"


def test_normalize_empty_values():
    assert normalize("") == ""
    assert normalize(None) == ""


def test_count_words_ignores_punctuation_only_tokens():
    assert count_words("Incrementar ventas en 25%") == 4
    assert count_words("  ¿ ! ") == 0
    assert count_words(None) == 0


def test_tokens_split_on_any_whitespace():
    assert tokens("uno\tdos\n tres") == ["uno", "dos", "tres"]


def test_common_words_requires_min_length_and_dedups():
    shared = common_words(
        "Ventas del norte y ventas del sur", "Crecimiento de ventas en el norte"
    )
    assert shared == ["ventas", "norte"]


def test_common_words_matches_across_accents():
    assert common_words("Satisfacción clientes", "satisfaccion de los clientes") == [
        "satisfaccion",
        "clientes",
    ]


def test_common_words_short_tokens_never_count():
    assert common_words("del los en", "del los en") == []
