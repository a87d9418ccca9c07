# apps/core/forms.py

from django import forms
from django.core.exceptions import ValidationError
from .models import Card

# Maior valor aceito por um BigIntegerField
MAX_ID = 2 ** 63 - 1


class MemberIdListField(forms.Field):
    """Lista de ids de membros (inteiros positivos), vinda de JSON"""

    default_error_messages = {
        'invalid_list': 'Informe uma lista de ids.',
        'invalid_id': 'Id de membro inválido: %(value)s.',
    }

    def _invalid(self, item):
        return ValidationError(self.error_messages['invalid_id'], code='invalid_id', params={'value': item})

    def to_python(self, value):
        if value in self.empty_values:
            return None
        if not isinstance(value, (list, tuple)):
            raise ValidationError(self.error_messages['invalid_list'], code='invalid_list')

        ids = []
        for item in value:
            # bool é subclasse de int, não aceitar true/false como id
            if isinstance(item, bool):
                raise self._invalid(item)
            # 2.7 não pode virar o membro 2
            if isinstance(item, float) and not item.is_integer():
                raise self._invalid(item)
            try:
                member_id = int(item)
            except (TypeError, ValueError, OverflowError):
                raise self._invalid(item)
            if not 0 < member_id <= MAX_ID:
                raise self._invalid(item)
            ids.append(member_id)
        return ids


class CardCreateForm(forms.Form):
    """Criação de card: título obrigatório"""

    title = forms.CharField(max_length=Card.TITLE_MAX_LENGTH)
    description = forms.CharField(required=False, empty_value=None)
    background_color = forms.CharField(max_length=20, required=False, empty_value=None)
    deadline = forms.DateTimeField(required=False)
    start_at = forms.DateTimeField(required=False)

    def clean_title(self):
        title = self.cleaned_data['title'].strip()
        if not title:
            raise ValidationError('O título não pode ficar em branco.')
        return title


class CardPatchForm(forms.Form):
    """
    Atualização parcial

    Campos ausentes ou nulos não alteram o card. String vazia é um
    valor: "" em description ou background_color limpa o campo.
    """

    title = forms.CharField(max_length=Card.TITLE_MAX_LENGTH, required=False, empty_value=None)
    description = forms.CharField(required=False, empty_value='')
    background_color = forms.CharField(max_length=20, required=False, empty_value='')
    deadline = forms.DateTimeField(required=False)
    start_at = forms.DateTimeField(required=False)

    def clean_title(self):
        title = self.cleaned_data['title']
        if self.data.get('title') is not None and not title:
            raise ValidationError('O título não pode ficar em branco.')
        return title

    def patch(self):
        """Apenas as chaves presentes na requisição e não nulas"""
        return {
            k: v for k, v in self.cleaned_data.items()
            if self.data.get(k) is not None and v is not None
        }


class MoveCardForm(forms.Form):
    """Destino do move: coluna e posição (opcional, sem posição = final da coluna)"""

    column_id = forms.IntegerField(min_value=1, max_value=MAX_ID)
    position = forms.IntegerField(min_value=0, required=False)


class WorkersForm(forms.Form):
    add = MemberIdListField(required=False)
    remove = MemberIdListField(required=False)
