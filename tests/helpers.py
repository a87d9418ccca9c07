"""Consultas auxiliares usadas pelos módulos de teste"""

from apps.core.models import Card


def column_titles(column):
    """Títulos dos cards vivos da coluna, na ordem do board"""
    return list(
        Card.objects.filter(column=column).order_by("position", "id").values_list("title", flat=True)
    )


def column_positions(column):
    return list(
        Card.objects.filter(column=column).order_by("position", "id").values_list("position", flat=True)
    )
