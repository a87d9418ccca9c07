"""Fixtures compartilhadas pelos testes de cards"""

import uuid

import pytest

from apps.board.services import CardService
from apps.core.models import Board, Card, Worker


@pytest.fixture
def board(db):
    board = Board.objects.create(title="Test board")
    board.create_default_columns()
    return board


@pytest.fixture
def columns(board):
    """Backlog, In Progress, Review, Done"""
    return list(board.columns.order_by("position"))


@pytest.fixture
def service():
    return CardService()


@pytest.fixture
def make_card(columns):
    """Cria um card vivo no final da coluna, com workers opcionais"""

    def _make(title="Card", column=None, workers=()):
        column = column or columns[0]
        position = Card.objects.filter(column=column).count()
        card = Card.objects.create(column=column, title=title, position=position)
        Worker.objects.bulk_create([Worker(card_id=card.id, member_id=m) for m in workers])
        return card

    return _make


@pytest.fixture
def lock_name():
    """Nome de lock único para os leases em processo não vazarem entre testes"""
    return f"test-{uuid.uuid4().hex}"

