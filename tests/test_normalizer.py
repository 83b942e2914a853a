import pytest

from wordchain.normalizer import ZWNJ, first_letter, last_letter, normalize, starts_with_letter


def test_legacy_kaf_and_yeh_match_persian_forms():
    # Arabic kaf U+0643 and Arabic yeh U+064A
    assert normalize('كتاب') == normalize('کتاب') == 'کتاب'
    assert normalize('ايران') == 'ایران'
    assert normalize('موسى') == 'موسی'


def test_heh_variants_collapse():
    assert normalize('خانۀ') == 'خانه'
    assert normalize('مدرسة') == 'مدرسه'


def test_diacritics_and_tatweel_are_stripped():
    assert normalize('کِتاب') == 'کتاب'
    assert normalize('کتـــاب') == 'کتاب'
    assert normalize('مُدَرِّسه') == 'مدرسه'


def test_alef_madda_survives():
    assert normalize('آب') == 'آب'
    # alef followed by a combining madda composes into the same letter
    assert normalize("\u0627\u0653ب") == "آب"


def test_non_alphabet_characters_become_single_spaces():
    assert normalize('  کتاب!!  ') == 'کتاب'
    assert normalize('abc کتاب 123 قلم') == 'کتاب قلم'
    assert normalize('کتاب\t\nقلم') == 'کتاب قلم'


def test_zwnj_is_kept_inside_words():
    word = f'می{ZWNJ}روم'
    assert normalize(word) == word


@pytest.mark.parametrize('value', [None, 42, '', '   ', 'ABC', '!?', ['کتاب']])
def test_unusable_input_normalizes_to_empty(value):
    assert normalize(value) == ''


def test_boundary_letters():
    assert first_letter('کتاب') == 'ک'
    assert last_letter('کتاب') == 'ب'
    assert first_letter('«باران»') == 'ب'
    assert last_letter('باران.') == 'ن'
    assert first_letter(f'{ZWNJ}باران') == 'ب'
    assert last_letter(f'باران{ZWNJ}') == 'ن'


def test_boundary_letters_of_empty_input_are_none():
    assert first_letter('') is None
    assert last_letter('123') is None
    assert first_letter(None) is None


def test_starts_with_letter():
    assert starts_with_letter(' کتاب')
    assert starts_with_letter('كتاب')
    assert not starts_with_letter('/state')
    assert not starts_with_letter('hello')
    assert not starts_with_letter('')
