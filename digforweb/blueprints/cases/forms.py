"""
Case forms.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, DateField, SubmitField
from wtforms.validators import DataRequired, Length, Optional
from digforweb.blueprints.helpers import optional_int
from digforweb.models.entities import CASE_STATUS_CHOICES, DEFAULT_CASE_STATUS


class CaseForm(FlaskForm):
    """Form for creating and editing a case."""

    # Victim choices are filled in by the route from the entity store
    victim_id = SelectField('Victim', coerce=optional_int, choices=[], validators=[
        DataRequired(message='Select the victim this case belongs to')
    ])

    case_type = StringField('Case Type', validators=[
        DataRequired(message='The case type is required'),
        Length(max=200)
    ], description='e.g. Email Compromise, Data Theft, Ransomware')

    incident_date = DateField('Incident Date', validators=[Optional()])

    summary = TextAreaField('Case Summary', validators=[
        Optional(),
        Length(max=5000)
    ])

    status = SelectField('Status', choices=CASE_STATUS_CHOICES, default=DEFAULT_CASE_STATUS)

    submit = SubmitField('Save Case')

    def set_victim_choices(self, victims):
        self.victim_id.choices = [(v.id, f'#{v.id} - {v.name}') for v in victims]

    def ensure_status_choice(self, status):
        """Keep a free-text status of an existing case selectable."""
        values = [value for value, _ in self.status.choices]
        if status and status not in values:
            self.status.choices = list(self.status.choices) + [(status, status)]
