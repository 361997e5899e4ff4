from flask_wtf import FlaskForm
from wtforms import PasswordField, StringField
from wtforms.validators import DataRequired


class LoginForm(FlaskForm):
    # Sem Length/Regexp: a comparação normaliza o usuário (strip + lower)
    username = StringField('Username', validators=[DataRequired(message="Username é obrigatório")])
    password = PasswordField('Password', validators=[DataRequired(message="Password é obrigatório")])
