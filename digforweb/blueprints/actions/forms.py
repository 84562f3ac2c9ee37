"""
Forensic action forms.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, TextAreaField, SelectField, SubmitField
from wtforms.fields import DateTimeLocalField
from wtforms.validators import DataRequired, Length, Optional
from digforweb.blueprints.helpers import enum_value, optional_int
from digforweb.models.entities import ActionStatus, ForensicStage


class ForensicActionForm(FlaskForm):
    """Form for recording a forensic action taken on a case."""

    case_id = SelectField('Case', coerce=optional_int, choices=[], validators=[
        DataRequired(message='Select the case this action belongs to')
    ])

    stage = SelectField('Forensic Stage', coerce=enum_value, validators=[
        DataRequired(message='Select the forensic stage')
    ], choices=[(s.value, s.label) for s in ForensicStage])

    description = TextAreaField('Action Description', validators=[
        Optional(),
        Length(max=5000)
    ])

    person_in_charge = StringField('Person in Charge', validators=[
        Optional(),
        Length(max=200)
    ])

    executed_at = DateTimeLocalField('Execution Time', validators=[Optional()])

    status = SelectField('Status', coerce=enum_value,
                         choices=[(s.value, s.label) for s in ActionStatus],
                         default=ActionStatus.PENDING.value)

    submit = SubmitField('Save Action')

    def set_case_choices(self, cases):
        self.case_id.choices = [(c.id, f'#{c.id} - {c.case_type}') for c in cases]
