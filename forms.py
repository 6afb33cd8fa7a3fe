from flask import has_request_context, request
from flask_wtf import FlaskForm
from wtforms import (
    StringField,
    PasswordField,
    BooleanField,
    TextAreaField,
    SelectField,
    SelectMultipleField,
    IntegerField,
    FloatField,
    DateTimeField,
    Field,
)
from wtforms.validators import (
    AnyOf,
    DataRequired,
    Length,
    Email,
    ValidationError,
    Optional,
    NumberRange,
    URL,
)
from models.user import User, USER_ROLES, COUNSELOR_SPECIALIZATIONS
from models.journal import JOURNAL_MOODS, TITLE_MAX_LENGTH, CONTENT_MAX_LENGTH
from models.mood import MOOD_VALUES, MOOD_ACTIVITIES
from models.task import TASK_PRIORITIES
from models.appointment import (
    APPOINTMENT_TYPES,
    APPOINTMENT_STATUSES,
    APPOINTMENT_DURATIONS,
    APPOINTMENT_LOCATIONS,
)
from models.study_session import SESSION_TYPES
from models.resource import RESOURCE_TYPES

DATETIME_FORMATS = ["%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d"]


def _choices(values):
    return [(value, value) for value in values]


class StrictStringMixin:
    """JSON bodies can carry numbers or objects where text is expected; reject them."""

    def process_formdata(self, valuelist):
        if valuelist and valuelist[0] is not None and not isinstance(valuelist[0], str):
            self.data = None
            raise ValueError(self.gettext("Not a valid string value."))
        super().process_formdata(valuelist)


class TextField(StrictStringMixin, StringField):
    pass


class TextBlockField(StrictStringMixin, TextAreaField):
    pass


class SecretField(StrictStringMixin, PasswordField):
    pass


class TagListField(Field):
    """A JSON list of tags, or one comma separated string."""

    def _value(self):
        return ", ".join(self.data or [])

    def _submitted_value(self):
        if has_request_context():
            payload = request.get_json(silent=True)
            if isinstance(payload, dict):
                return payload.get(self.name)
        return None

    def process_formdata(self, valuelist):
        if isinstance(self._submitted_value(), str):
            valuelist = valuelist[0].split(",") if valuelist else []

        tags = []
        for value in valuelist:
            tag = str(value).strip()
            if tag and tag not in tags:
                tags.append(tag)
        self.data = tags


class LoginForm(FlaskForm):
    email = TextField("Email", validators=[DataRequired(), Email()])
    password = SecretField("Password", validators=[DataRequired()])
    remember = BooleanField("Remember Me")


class RegistrationForm(FlaskForm):
    email = TextField("Email", validators=[DataRequired(), Email()])
    password = SecretField("Password", validators=[DataRequired(), Length(min=6)])
    first_name = TextField("First Name", validators=[DataRequired(), Length(max=100)])
    last_name = TextField("Last Name", validators=[DataRequired(), Length(max=100)])
    role = SelectField("Role", choices=_choices(USER_ROLES), default="student")
    year = TextField("Year", validators=[Optional(), Length(max=20)])
    major = TextField("Major", validators=[Optional(), Length(max=100)])
    specializations = SelectMultipleField(
        "Specializations", choices=_choices(COUNSELOR_SPECIALIZATIONS)
    )

    def validate_email(self, email):
        user = User.query.filter_by(email=email.data.strip().lower()).first()
        if user:
            raise ValidationError(
                "That email is already registered. Please use a different one."
            )


class JournalEntryForm(FlaskForm):
    """Form for creating a journal entry."""

    title = TextField(
        "Title",
        validators=[
            DataRequired(message="Title is required"),
            Length(
                max=TITLE_MAX_LENGTH,
                message=f"Title must be at most {TITLE_MAX_LENGTH} characters long",
            ),
        ],
    )
    content = TextBlockField(
        "Content",
        validators=[
            DataRequired(message="Please enter some content for your journal entry"),
            Length(
                max=CONTENT_MAX_LENGTH,
                message=f"Your journal entry must be at most {CONTENT_MAX_LENGTH} characters long",
            ),
        ],
    )
    tags = TagListField("Tags")
    mood = SelectField("Mood", choices=_choices(JOURNAL_MOODS), validators=[Optional()],
                       validate_choice=False)
    is_private = BooleanField("Private", default=True)

    def validate_mood(self, mood):
        if mood.data and mood.data.strip() not in JOURNAL_MOODS:
            raise ValidationError("Not a valid mood.")


class JournalEntryUpdateForm(JournalEntryForm):
    """Partial update: every field may be left out."""

    title = TextField("Title", validators=[Optional(), Length(max=TITLE_MAX_LENGTH)])
    content = TextBlockField("Content", validators=[Optional(), Length(max=CONTENT_MAX_LENGTH)])
    is_pinned = BooleanField("Pinned")


class MoodForm(FlaskForm):
    mood = SelectField("Mood", choices=_choices(MOOD_VALUES), validators=[DataRequired()])
    note = TextField("Note", validators=[Optional(), Length(max=200)])
    stress_level = IntegerField("Stress Level", validators=[Optional(), NumberRange(min=1, max=10)])
    sleep_hours = FloatField("Sleep Hours", validators=[Optional(), NumberRange(min=0, max=24)])
    activities = SelectMultipleField("Activities", choices=_choices(MOOD_ACTIVITIES))


class TaskForm(FlaskForm):
    """Form for creating a task."""

    title = TextField("Title", validators=[DataRequired(), Length(max=200)])
    description = TextBlockField("Description", validators=[Optional(), Length(max=1000)])
    subject = TextField("Subject", validators=[DataRequired(), Length(max=100)])
    priority = SelectField("Priority", choices=_choices(TASK_PRIORITIES), default="medium")
    due_date = DateTimeField("Due Date", format=DATETIME_FORMATS, validators=[DataRequired()])
    estimated_hours = FloatField(
        "Estimated Hours", default=1, validators=[Optional(), NumberRange(min=0.5, max=50)]
    )
    actual_hours = FloatField("Actual Hours", default=0, validators=[Optional(), NumberRange(min=0)])
    tags = TagListField("Tags")
    is_completed = BooleanField("Completed")


class TaskUpdateForm(TaskForm):
    """Partial update: every field may be left out."""

    title = TextField("Title", validators=[Optional(), Length(max=200)])
    subject = TextField("Subject", validators=[Optional(), Length(max=100)])
    priority = SelectField("Priority", choices=_choices(TASK_PRIORITIES), validators=[Optional()],
                           validate_choice=False)
    due_date = DateTimeField("Due Date", format=DATETIME_FORMATS, validators=[Optional()])

    def validate_priority(self, priority):
        if priority.data and priority.data not in TASK_PRIORITIES:
            raise ValidationError("Not a valid priority.")


class AppointmentForm(FlaskForm):
    """A student's request to meet a counselor."""

    counselor_id = IntegerField("Counselor", validators=[DataRequired()])
    type = SelectField("Type", choices=_choices(APPOINTMENT_TYPES), validators=[DataRequired()])
    preferred_date = DateTimeField("Preferred Date", format=DATETIME_FORMATS,
                                   validators=[DataRequired()])
    description = TextBlockField("Description", validators=[Optional(), Length(max=500)])
    is_urgent = BooleanField("Urgent")
    duration = IntegerField("Duration", default=60,
                            validators=[Optional(), AnyOf(APPOINTMENT_DURATIONS)])
    location = SelectField("Location", choices=_choices(APPOINTMENT_LOCATIONS), default="in-person")


class AppointmentStatusForm(FlaskForm):
    """A counselor's decision on an appointment."""

    status = SelectField("Status", choices=_choices(APPOINTMENT_STATUSES),
                         validators=[DataRequired()])
    scheduled_date = DateTimeField("Scheduled Date", format=DATETIME_FORMATS,
                                   validators=[Optional()])
    counselor_notes = TextBlockField("Notes", validators=[Optional(), Length(max=1000)])
    meeting_link = TextField("Meeting Link", validators=[Optional(), URL(), Length(max=500)])
    follow_up_required = BooleanField("Follow-up Required")


class StudySessionForm(FlaskForm):
    """Form for logging a study session."""

    subject = TextField("Subject", validators=[DataRequired(), Length(max=100)])
    duration = IntegerField("Duration", validators=[DataRequired(), NumberRange(min=1)])
    planned_duration = IntegerField("Planned Duration", default=25,
                                    validators=[Optional(), NumberRange(min=1)])
    break_duration = IntegerField("Break Duration", default=5,
                                  validators=[Optional(), NumberRange(min=0)])
    type = SelectField("Type", choices=_choices(SESSION_TYPES), default="custom")
    start_time = DateTimeField("Start Time", format=DATETIME_FORMATS, validators=[DataRequired()])
    end_time = DateTimeField("End Time", format=DATETIME_FORMATS, validators=[Optional()])
    is_completed = BooleanField("Completed")
    productivity = IntegerField("Productivity", validators=[Optional(), NumberRange(min=1, max=5)])
    notes = TextBlockField("Notes", validators=[Optional(), Length(max=300)])
    related_task_id = IntegerField("Related Task", validators=[Optional()])


class StudySessionUpdateForm(StudySessionForm):
    """Partial update: every field may be left out."""

    subject = TextField("Subject", validators=[Optional(), Length(max=100)])
    duration = IntegerField("Duration", validators=[Optional(), NumberRange(min=1)])
    type = SelectField("Type", choices=_choices(SESSION_TYPES), validators=[Optional()],
                       validate_choice=False)
    start_time = DateTimeField("Start Time", format=DATETIME_FORMATS, validators=[Optional()])

    def validate_type(self, field):
        if field.data and field.data not in SESSION_TYPES:
            raise ValidationError("Not a valid session type.")


class ResourceForm(FlaskForm):
    """Form for saving a note, link or media reference."""

    title = TextField("Title", validators=[DataRequired(), Length(max=200)])
    type = SelectField("Type", choices=_choices(RESOURCE_TYPES), validators=[DataRequired()])
    content = TextBlockField("Content", validators=[Optional()])
    subject = TextField("Subject", validators=[DataRequired(), Length(max=100)])
    folder = TextField("Folder", default="General", validators=[Optional(), Length(max=100)])
    tags = TagListField("Tags")
    is_public = BooleanField("Public")
    description = TextBlockField("Description", validators=[Optional(), Length(max=500)])


class ResourceUpdateForm(ResourceForm):
    """Partial update: every field may be left out."""

    title = TextField("Title", validators=[Optional(), Length(max=200)])
    type = SelectField("Type", choices=_choices(RESOURCE_TYPES), validators=[Optional()],
                       validate_choice=False)
    subject = TextField("Subject", validators=[Optional(), Length(max=100)])

    def validate_type(self, field):
        if field.data and field.data not in RESOURCE_TYPES:
            raise ValidationError("Not a valid resource type.")
