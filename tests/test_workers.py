"""
Testes da reconciliação de workers: validação de add/remove, semântica
do snapshot e a transação do serviço em volta.
"""
import pytest

from apps.board.workers import WorkerReconciler
from apps.core.exceptions import AlreadyAssigned, CardNotFound, NotAssigned, ValidationFailed
from apps.core.models import Worker


def worker_rows(card):
    return list(Worker.objects.for_card(card.id).ordered_by_member().values_list("member_id", flat=True))


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Fase de add
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_add_to_empty_set(service, make_card):
    card = make_card()

    result = service.update_workers(card.id, add=[2, 1])

    assert result.worker_ids == [1, 2]
    assert worker_rows(card) == [1, 2]


def test_add_same_set_again_is_rejected(service, make_card):
    card = make_card()
    service.update_workers(card.id, add=[1, 2])

    with pytest.raises(AlreadyAssigned) as exc:
        service.update_workers(card.id, add=[1, 2])

    assert exc.value.code == "already_assigned"
    assert exc.value.status == 409
    assert exc.value.member_ids == [1, 2]
    assert worker_rows(card) == [1, 2]


def test_add_subset_of_current_is_rejected(service, make_card):
    card = make_card(workers=[1, 2, 3])

    with pytest.raises(AlreadyAssigned):
        service.update_workers(card.id, add=[3])

    assert worker_rows(card) == [1, 2, 3]


def test_partial_overlap_only_adds_missing_ids(service, make_card):
    """Ids já atribuídos são ignorados e o conjunto continua sem duplicatas"""
    card = make_card(workers=[1])

    result = service.update_workers(card.id, add=[1, 2])

    assert result.worker_ids == [1, 2]
    assert Worker.objects.for_card(card.id).count() == 2


def test_duplicate_ids_in_one_request_are_inserted_once(service, make_card):
    card = make_card()

    result = service.update_workers(card.id, add=[5, 5, 5])

    assert result.worker_ids == [5]


def test_empty_add_is_ignored(service, make_card):
    card = make_card(workers=[1])

    result = service.update_workers(card.id, add=[])

    assert result.worker_ids == [1]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Fase de remove
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_remove_assigned_workers(service, make_card):
    card = make_card(workers=[1, 2, 3])

    result = service.update_workers(card.id, remove=[1, 3])

    assert result.worker_ids == [2]


def test_remove_absent_worker_is_rejected(service, make_card):
    card = make_card(workers=[1, 2])

    with pytest.raises(NotAssigned) as exc:
        service.update_workers(card.id, remove=[9])

    assert exc.value.code == "not_assigned"
    assert exc.value.member_ids == [9]
    assert worker_rows(card) == [1, 2]


def test_remove_with_one_absent_id_removes_nothing(service, make_card):
    card = make_card(workers=[1, 2])

    with pytest.raises(NotAssigned) as exc:
        service.update_workers(card.id, remove=[1, 9])

    assert exc.value.member_ids == [9]
    assert worker_rows(card) == [1, 2]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Chamadas combinadas (mesmo snapshot anterior à chamada)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_add_and_remove_disjoint_ids(service, make_card):
    card = make_card(workers=[1, 2])

    result = service.update_workers(card.id, add=[3], remove=[1])

    assert result.worker_ids == [2, 3]


def test_remove_of_id_added_in_same_call_fails_and_rolls_back(service, make_card):
    """A fase de remove vê o snapshot, não as linhas recém-adicionadas"""
    card = make_card(workers=[1])

    with pytest.raises(NotAssigned):
        service.update_workers(card.id, add=[2], remove=[2])

    # o add da chamada que falhou também é desfeito
    assert worker_rows(card) == [1]


def test_add_of_id_removed_in_same_call_is_already_assigned(service, make_card):
    card = make_card(workers=[1, 2])

    with pytest.raises(AlreadyAssigned):
        service.update_workers(card.id, add=[1], remove=[1])

    assert worker_rows(card) == [1, 2]


def test_reconciler_snapshot_is_taken_once(make_card):
    card = make_card(workers=[1])
    reconciler = WorkerReconciler(card.id)

    assert reconciler.add([2]) == [2]
    # uma releitura veria o 2; o snapshot não
    assert reconciler.snapshot == [1]
    with pytest.raises(NotAssigned):
        reconciler.remove([2])


def test_reconciler_apply_returns_diff(make_card):
    card = make_card(workers=[1, 2])

    added, removed = WorkerReconciler(card.id).apply(add_ids=[3, 4], remove_ids=[2, 2])

    assert added == [3, 4]
    assert removed == [2]
    assert worker_rows(card) == [1, 3, 4]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Validação e busca
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_unknown_card_is_not_found(service, db):
    with pytest.raises(CardNotFound):
        service.update_workers(404, add=[1])


def test_deleted_card_is_not_found(service, make_card):
    card = make_card(workers=[1])
    card.soft_delete()

    with pytest.raises(CardNotFound):
        service.update_workers(card.id, remove=[1])


@pytest.mark.parametrize("payload", [
    {"add": "1,2"},
    {"add": ["abc"]},
    {"add": [0]},
    {"remove": [-3]},
    {"remove": [True]},
    {"add": [2 ** 63]},
    {"add": [2.7]},
    {"remove": [1, 2 ** 64]},
])
def test_malformed_ids_are_rejected_before_storage(service, make_card, payload):
    card = make_card(workers=[1])

    with pytest.raises(ValidationFailed) as exc:
        service.update_workers(card.id, **payload)

    assert exc.value.code == "validation"
    assert set(exc.value.errors) <= {"add", "remove"}
    assert worker_rows(card) == [1]


def test_numeric_strings_are_accepted(service, make_card):
    card = make_card()

    result = service.update_workers(card.id, add=["7", 3])

    assert result.worker_ids == [3, 7]
