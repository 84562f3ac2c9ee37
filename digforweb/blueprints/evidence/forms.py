"""
Evidence forms.
"""
from flask_wtf import FlaskForm
from wtforms import StringField, SelectField, BooleanField, SubmitField
from wtforms.fields import DateTimeLocalField
from wtforms.validators import DataRequired, Length, Optional, ValidationError
from digforweb.blueprints.helpers import optional_int
from digforweb.utils.hashing import is_hex_digest


class EvidenceForm(FlaskForm):
    """Form for registering and editing an item of evidence."""

    case_id = SelectField('Case', coerce=optional_int, choices=[], validators=[
        DataRequired(message='Select the case this evidence belongs to')
    ])

    evidence_type = StringField('Evidence Type', validators=[
        DataRequired(message='The evidence type is required'),
        Length(max=200)
    ], description='e.g. Email Logs, Mobile Device, Disk Image')

    storage_location = StringField('Storage Location', validators=[
        DataRequired(message='The storage location is required'),
        Length(max=500)
    ])

    integrity_hash = StringField('Integrity Hash', validators=[
        Optional(),
        Length(max=128)
    ], description='Hex digest of the item as collected')

    generate_hash = BooleanField('Generate a SHA-256 integrity hash')

    collected_at = DateTimeLocalField('Collection Time', validators=[Optional()])

    submit = SubmitField('Save Evidence')

    def set_case_choices(self, cases):
        self.case_id.choices = [(c.id, f'#{c.id} - {c.case_type}') for c in cases]

    def validate_integrity_hash(self, integrity_hash):
        """Hashes are hexadecimal digests."""
        if integrity_hash.data and not self.generate_hash.data \
                and not is_hex_digest(integrity_hash.data.strip()):
            raise ValidationError('The integrity hash must be a hexadecimal digest.')
