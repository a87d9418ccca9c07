# apps/board/urls.py

from django.urls import path
from . import views

app_name = 'board'

urlpatterns = [
    # Cards de uma coluna
    path('columns/<int:column_id>/cards/', views.column_cards, name='column_cards'),

    # Card
    path('cards/<int:card_id>/', views.card_detail, name='card_detail'),

    # Workers
    path('cards/<int:card_id>/workers/', views.card_workers, name='card_workers'),

    # Movimentação (drag-and-drop)
    path('cards/<int:card_id>/move/', views.card_move, name='card_move'),
]
