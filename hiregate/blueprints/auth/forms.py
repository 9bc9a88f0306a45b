from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, SelectField, SubmitField
from wtforms.validators import DataRequired, Email

from ...models.enums import Role


class LoginForm(FlaskForm):
    email = StringField("Email", validators=[DataRequired(), Email()])
    password = PasswordField("Password", validators=[DataRequired()])
    submit = SubmitField("Login")


class RoleForm(FlaskForm):
    role = SelectField("Role", choices=[(r.value, r.value.replace("_", " ").title()) for r in Role],
                       validators=[DataRequired()])
