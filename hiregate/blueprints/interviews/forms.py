from flask_wtf import FlaskForm
from wtforms import StringField, IntegerField, TextAreaField, SubmitField
from wtforms.validators import DataRequired, Length, NumberRange, Optional


class InterviewForm(FlaskForm):
    position = StringField("Job position", validators=[DataRequired(), Length(max=200)])
    job_desc = TextAreaField("Job description", validators=[DataRequired()], render_kw={"rows": 5})
    job_experience = IntegerField("Experience (years)", default=0, validators=[Optional(), NumberRange(min=0, max=50)])
    tech_stack = StringField("Tech stack", validators=[Optional(), Length(max=500)])
    duration_minutes = IntegerField("Interview duration (minutes)", default=30,
                                    validators=[Optional(), NumberRange(min=5, max=120)])
    # one question per line
    questions = TextAreaField("Questions", validators=[DataRequired()], render_kw={"rows": 8})
    submit = SubmitField("Create interview")

    def question_list(self):
        return [q.strip() for q in (self.questions.data or "").splitlines() if q.strip()]
