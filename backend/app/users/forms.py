from wtforms import Form, PasswordField, StringField
from wtforms.validators import DataRequired, Email, Length, Optional

from app.utils.validators import strip_filter


class RegistrationForm(Form):
    email = StringField('Email', filters=[strip_filter], validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired(), Length(min=8, max=128)])
    name = StringField('Name', filters=[strip_filter], validators=[Optional(), Length(max=100)])


class LoginForm(Form):
    email = StringField('Email', filters=[strip_filter], validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])
