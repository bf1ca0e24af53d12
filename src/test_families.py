from datetime import date

from families import build_family_groups
from graph import PersonGraph
from models import FamilyGroup, Person


def _person(pid, parents=(), spouse=None, children=()):
    return Person(pid, f"Person {pid}", date(1960, 1, pid), tuple(parents), spouse, tuple(children))


def _three_siblings_two_married():
    """Couple 1+2 with children 3 (married to 4), 5 (single) and 6 (married to 7)."""
    return PersonGraph([
        _person(1, spouse=2, children=[3, 5, 6]),
        _person(2, spouse=1, children=[3, 5, 6]),
        _person(3, parents=[1, 2], spouse=4),
        _person(4, spouse=3),
        _person(5, parents=[1, 2]),
        _person(6, parents=[1, 2], spouse=7),
        _person(7, spouse=6),
    ])


def test_unmarried_siblings_form_one_group():
    pg = PersonGraph([
        _person(1, children=[2, 3]),
        _person(2, parents=[1]),
        _person(3, parents=[1]),
    ])

    assert build_family_groups([2, 3], pg) == [FamilyGroup((2, 3))]


def test_spouse_and_unmarried_siblings_join_the_first_scanned_person():
    pg = _three_siblings_two_married()

    groups = build_family_groups([3, 4, 5, 6, 7], pg)

    assert groups == [FamilyGroup((3, 4, 5)), FamilyGroup((6, 7))]


def test_every_person_is_in_exactly_one_group():
    pg = _three_siblings_two_married()
    row = [7, 5, 3, 6, 4]

    groups = build_family_groups(row, pg)

    members = [m for g in groups for m in g.members]
    assert sorted(members) == sorted(row)
    for group in groups:
        assert list(group.members) == sorted(group.members)


def test_spouse_on_another_row_is_not_grouped():
    pg = _three_siblings_two_married()

    assert build_family_groups([1, 2, 4], pg) == [FamilyGroup((1, 2)), FamilyGroup((4,))]


def test_scan_order_decides_who_collects_the_siblings():
    pg = _three_siblings_two_married()

    groups = build_family_groups([5, 3, 4, 6, 7], pg)

    # 5 is scanned first and only collects unmarried siblings (none)
    assert groups == [FamilyGroup((5,)), FamilyGroup((3, 4)), FamilyGroup((6, 7))]
