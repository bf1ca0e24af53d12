from datetime import date

from models import Person
from validation import validate_persons


def _person(pid, birth_year=1950, parents=(), spouse=None, children=()):
    return Person(pid, f"P{pid}", date(birth_year, 1, 2), tuple(parents), spouse, tuple(children))


def test_consistent_family_has_no_warnings():
    persons = [
        _person(1, 1950, spouse=2, children=[3]),
        _person(2, 1952, spouse=1, children=[3]),
        _person(3, 1980, parents=[1, 2]),
    ]

    assert validate_persons(persons) == []


def test_one_sided_links_are_reported():
    warnings = validate_persons([
        _person(1, 1950, spouse=2, children=[3]),
        _person(2, 1952),
        _person(3, 1980),
    ])

    assert "Spouse link is not mutual: P1 (1) -> P2 (2)" in warnings
    assert any("lists P3 (3) as a child" in w for w in warnings)


def test_unknown_references_are_reported():
    warnings = validate_persons([_person(1, parents=[8], spouse=9)])

    assert "P1 (1) lists unknown person 8 in parentIds" in warnings
    assert "P1 (1) lists unknown spouse 9" in warnings


def test_too_many_parents():
    warnings = validate_persons([
        _person(1, 1920, children=[4]),
        _person(2, 1920, children=[4]),
        _person(3, 1920, children=[4]),
        _person(4, 1950, parents=[1, 2, 3]),
    ])

    assert warnings == ["P4 (4) has more than two parents"]


def test_cycles_and_impossible_ages():
    warnings = validate_persons([
        _person(1, 1950, parents=[2], children=[2]),
        _person(2, 1960, parents=[1], children=[1]),
        _person(3, 1990, parents=[2]),
    ])

    assert any(w.startswith("Cycle detected in parent-child relationships") for w in warnings)
    assert "Impossible: P1 born before parent P2" in warnings
    assert "Suspicious: P1 was less than 12 years old when P2 was born" in warnings
    assert any("lists P2 (2) as a parent, but not the other way round" in w for w in warnings)
