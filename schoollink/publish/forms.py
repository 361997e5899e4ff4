from flask_wtf import FlaskForm
from wtforms import FieldList, FormField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Optional

from schoollink.core.constants import EVENT_CATEGORIES


class EventForm(FlaskForm):
    title = StringField('Event Title', validators=[DataRequired(message="Título é obrigatório")])
    # Data de calendário no formato YYYY-MM-DD (validada no CollectionSync)
    date = StringField('Date', validators=[DataRequired(message="Data é obrigatória")])
    description = TextAreaField('Description', validators=[DataRequired(message="Descrição é obrigatória")])
    category = SelectField(
        'Category',
        choices=[(c, c) for c in EVENT_CATEGORIES],
        default=EVENT_CATEGORIES[0],
        validators=[Optional()],
    )


class NoticeForm(FlaskForm):
    content = TextAreaField('Notice', validators=[DataRequired(message="Aviso não pode ser vazio")])


class ResultForm(FlaskForm):
    class Meta:
        csrf = False # O CSRF é tratado no form pai

    student_id = StringField('Student Id', validators=[DataRequired()])
    student_name = StringField('Student Name')
    score = StringField('Score')
    rank = StringField('Rank')


class ScoresForm(FlaskForm):
    event_id = StringField('Event', validators=[DataRequired(message="Escolha um evento")])
    # O nome dos campos segue o padrão do WTForms: results-{index}-score
    results = FieldList(FormField(ResultForm), min_entries=0)
