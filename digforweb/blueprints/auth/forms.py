"""
Authentication forms.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SelectField, SubmitField
from wtforms.validators import DataRequired, Email, Length, EqualTo, Optional, ValidationError
from digforweb.models.user import User
from digforweb.services.auth_service import MIN_PASSWORD_LENGTH
from digforweb.services.permissions import ROLE_CHOICES, ROLE_VIEWER


class LoginForm(FlaskForm):
    """User login form."""
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember_me = BooleanField('Remember me')
    submit = SubmitField('Log In')


class RegistrationForm(FlaskForm):
    """Self-service registration form."""
    name = StringField('Name', validators=[DataRequired(), Length(min=2, max=200)])
    email = StringField('Email', validators=[DataRequired(), Email(), Length(max=120)])
    contact = StringField('Contact', validators=[Optional(), Length(max=50)])
    role = SelectField('Role', choices=ROLE_CHOICES, default=ROLE_VIEWER)
    password = PasswordField('Password', validators=[
        DataRequired(),
        Length(min=MIN_PASSWORD_LENGTH,
               message=f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
    ])
    password_confirm = PasswordField('Confirm Password', validators=[
        DataRequired(),
        EqualTo('password', message='Passwords must match.')
    ])
    submit = SubmitField('Register')

    def validate_email(self, email):
        """Check if email already exists."""
        if User.query.filter_by(email=email.data.strip().lower()).first():
            raise ValidationError('This email is already registered.')
