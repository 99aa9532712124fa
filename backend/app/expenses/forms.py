from wtforms import DateField, DecimalField, Form, SelectField, StringField, TextAreaField
from wtforms.validators import InputRequired, Length, NumberRange, Optional

from app.utils.enums import ExpenseCategory
from app.utils.validators import strip_filter


class ExpenseForm(Form):
    title = StringField(
        'Title',
        filters=[strip_filter],
        validators=[InputRequired(), Length(min=1, max=200)],
    )
    # InputRequired, not DataRequired: an amount of 0 is valid
    amount = DecimalField(
        'Amount',
        places=2,
        validators=[InputRequired(), NumberRange(min=0, max=1_000_000_000)],
    )
    category = SelectField(
        'Category',
        choices=[(c, c) for c in ExpenseCategory.values()],
        validators=[InputRequired()],
    )
    date = DateField('Date', format='%Y-%m-%d', validators=[InputRequired()])
    notes = TextAreaField('Notes', filters=[strip_filter], validators=[Optional(), Length(max=2000)])

