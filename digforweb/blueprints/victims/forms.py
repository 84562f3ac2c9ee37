"""
Victim forms.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, DateField, SubmitField
from wtforms.validators import DataRequired, Length, Optional


class VictimForm(FlaskForm):
    """Form for creating and editing a victim report."""

    name = StringField('Name', validators=[
        DataRequired(message='The victim name is required'),
        Length(max=200)
    ])

    contact = StringField('Contact', validators=[
        Optional(),
        Length(max=100)
    ], description='Phone number or email address')

    location = StringField('Location', validators=[
        Optional(),
        Length(max=200)
    ])

    report_date = DateField('Report Date', validators=[Optional()])

    report_description = TextAreaField('Report Description', validators=[
        Optional(),
        Length(max=5000)
    ])

    submit = SubmitField('Save Victim')
