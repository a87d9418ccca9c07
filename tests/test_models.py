"""
Helpers dos models: managers de exclusão lógica, aplicação de patch,
serialização e os forms que validam o JSON de entrada.
"""
from datetime import datetime, timezone

import pytest

from apps.core.forms import CardPatchForm, MemberIdListField, MoveCardForm
from apps.core.models import Board, Card, Worker
from django.core.exceptions import ValidationError


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_default_columns_are_created_once(board):
    board.create_default_columns()

    titles = list(board.columns.order_by("position").values_list("title", flat=True))
    assert titles == Board.DEFAULT_COLUMNS


def test_soft_deleted_cards_leave_default_manager(make_card):
    live = make_card("live")
    gone = make_card("gone")

    gone.soft_delete()

    assert list(Card.objects.all()) == [live]
    assert set(Card.all_objects.all()) == {live, gone}
    assert list(Card.all_objects.deleted()) == [gone]
    assert gone.is_deleted and not live.is_deleted


def test_apply_patch_skips_missing_and_unchanged(make_card):
    card = make_card("Same")

    changed = card.apply_patch({"title": "Same", "description": "new", "deadline": None})

    assert changed == ["description"]
    assert card.description == "new"


def test_to_dict_shape(make_card):
    card = make_card("Shape")
    card.deadline = datetime(2026, 12, 24, 18, 30, tzinfo=timezone.utc)

    data = card.to_dict([2, 5])

    assert data["id"] == card.id
    assert data["column_id"] == card.column_id
    assert data["deadline"] == "2026-12-24T18:30:00+00:00"
    assert data["start_at"] is None
    assert data["workers"] == [2, 5]
    assert set(data) == {
        "id", "column_id", "title", "description", "background_color", "deadline",
        "start_at", "position", "created_at", "updated_at", "workers",
    }


def test_orphaned_workers(make_card):
    kept = make_card(workers=[1])
    gone = make_card(workers=[2, 3])
    gone.soft_delete()
    Worker.objects.create(card_id=999999, member_id=4)

    orphans = Worker.objects.orphaned().order_by("member_id")

    assert list(orphans.values_list("member_id", flat=True)) == [2, 3, 4]
    assert Worker.objects.member_ids(kept.id) == [1]


def test_for_cards_groups_by_card(make_card):
    a = make_card(workers=[3, 1])
    b = make_card(workers=[2])

    rows = list(Worker.objects.for_cards([b.id, a.id]).values_list("card_id", "member_id"))

    assert rows == [(a.id, 1), (a.id, 3), (b.id, 2)]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Forms
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@pytest.mark.parametrize("value, expected", [
    (None, None),
    ([], None),
    ([1, 2], [1, 2]),
    (("4",), [4]),
    ([2.0, 2 ** 63 - 1], [2, 2 ** 63 - 1]),
])
def test_member_id_list_field_accepts(value, expected):
    assert MemberIdListField(required=False).clean(value) == expected


@pytest.mark.parametrize("value", [
    "1", 3, [None], ["abc"], [False], [0], ["-1"], [2.7], [2 ** 63], [float("inf")],
])
def test_member_id_list_field_rejects(value):
    with pytest.raises(ValidationError):
        MemberIdListField(required=False).clean(value)


def test_patch_form_keeps_empty_strings_and_drops_nulls():
    form = CardPatchForm({"title": "New", "description": "", "deadline": None})

    assert form.is_valid(), form.errors
    assert form.patch() == {"title": "New", "description": ""}


def test_move_form_position_is_optional():
    form = MoveCardForm({"column_id": 3})

    assert form.is_valid(), form.errors
    assert form.cleaned_data == {"column_id": 3, "position": None}
