from hillside.forms.registration import RegistrationFlow
from hillside.forms.validation import (
    PASSWORD_MISMATCH,
    WRITER_REQUIRED,
    validate_contact_form,
    validate_login,
    validate_print_media_form,
    validate_profile_fields,
    validate_publication_form,
    validate_registration_step_one,
    validate_registration_step_two,
    validate_user_form,
)
from hillside.forms.writers import WriterPicker

__all__ = [
    "PASSWORD_MISMATCH",
    "RegistrationFlow",
    "WRITER_REQUIRED",
    "WriterPicker",
    "validate_contact_form",
    "validate_login",
    "validate_print_media_form",
    "validate_profile_fields",
    "validate_publication_form",
    "validate_registration_step_one",
    "validate_registration_step_two",
    "validate_user_form",
]
