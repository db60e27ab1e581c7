"""Step lists for the lead and vendor wizards."""

from typing import Any

from app.application.use_cases.form_wizard import FieldRule, StepDescriptor, StepKind
from app.application.use_cases.user_messages import UserMessages
from app.domain.entities.lead import LeadSource
from app.domain.value_objects.field_formats import (
    format_phone_number,
    format_postal_code,
    format_street_number,
    validate_email,
    validate_phone_number,
    validate_postal_code,
    validate_street_number,
)


def _is_lead_source(value: Any) -> bool:
    return value in LeadSource._value2member_map_


PHONE_NUMBER = FieldRule(
    "phone_number",
    required_message=UserMessages.PHONE_NUMBER_REQUIRED,
    format_check=validate_phone_number,
    format_message=UserMessages.PHONE_NUMBER_INVALID,
    formatter=format_phone_number,
)
STREET_NUMBER = FieldRule(
    "street_number",
    required_message=UserMessages.STREET_NUMBER_REQUIRED,
    format_check=validate_street_number,
    format_message=UserMessages.STREET_NUMBER_INVALID,
    formatter=format_street_number,
)
STREET_NAME = FieldRule("street_name", required_message=UserMessages.STREET_NAME_REQUIRED)
APT_UNIT_BLDG = FieldRule("apt_unit_bldg")
POSTAL_CODE = FieldRule(
    "postal_code",
    required_message=UserMessages.POSTAL_CODE_REQUIRED,
    format_check=validate_postal_code,
    format_message=UserMessages.POSTAL_CODE_INVALID,
    formatter=format_postal_code,
)
ADDRESS_FIELDS = (STREET_NUMBER, STREET_NAME, APT_UNIT_BLDG, POSTAL_CODE)

REVIEW_STEP = StepDescriptor(
    "review",
    "Review & Submit",
    kind=StepKind.REVIEW,
    description="Review all information before submitting",
)

LEAD_WIZARD_STEPS = (
    StepDescriptor(
        "business",
        "Business Information",
        fields=(FieldRule("business_name", required_message=UserMessages.BUSINESS_NAME_REQUIRED),),
        description="Enter the basic business details",
    ),
    StepDescriptor(
        "contact",
        "Contact Details",
        fields=(PHONE_NUMBER,),
        description="Add phone number and contact information",
    ),
    StepDescriptor(
        "address",
        "Address Information",
        fields=ADDRESS_FIELDS,
        description="Provide the business location",
    ),
    StepDescriptor(
        "source",
        "Lead Source",
        fields=(
            FieldRule(
                "source",
                required_message=UserMessages.SOURCE_REQUIRED,
                format_check=_is_lead_source,
                format_message=UserMessages.SOURCE_INVALID,
            ),
            FieldRule("source_url"),
        ),
        description="Specify where this lead came from",
    ),
    StepDescriptor(
        "documents",
        "Documents & Notes",
        fields=(FieldRule("uploaded_file"), FieldRule("notes")),
        description="Upload files and add additional notes",
    ),
    REVIEW_STEP,
)

SELECT_LEAD_STEP = StepDescriptor(
    "select-lead",
    "Select Contacted Lead",
    kind=StepKind.SELECT_LEAD,
    description="Choose a contacted lead to convert to a vendor",
)

VENDOR_DETAIL_STEPS = (
    StepDescriptor(
        "business",
        "Business Information",
        fields=(
            FieldRule("legal_name", required_message=UserMessages.LEGAL_NAME_REQUIRED),
            FieldRule("business_name", required_message=UserMessages.BUSINESS_NAME_REQUIRED),
        ),
        description="Enter the legal and business name",
    ),
    StepDescriptor(
        "contact",
        "Contact Information",
        fields=(
            FieldRule(
                "email",
                required_message=UserMessages.EMAIL_REQUIRED,
                format_check=validate_email,
                format_message=UserMessages.EMAIL_INVALID,
            ),
            FieldRule("phone_number", required_message=UserMessages.PHONE_NUMBER_REQUIRED),
        ),
        description="Add email and phone number",
    ),
    StepDescriptor(
        "address",
        "Address",
        fields=ADDRESS_FIELDS,
        description="Provide the business address",
    ),
    REVIEW_STEP,
)


def vendor_wizard_steps(lead_preselected: bool) -> tuple[StepDescriptor, ...]:
    """
    Build the vendor wizard step list.

    Args:
        lead_preselected: True when the wizard starts from a known lead

    Returns:
        Steps, with the lead picker first unless a lead is preselected
    """
    if lead_preselected:
        return VENDOR_DETAIL_STEPS
    return (SELECT_LEAD_STEP,) + VENDOR_DETAIL_STEPS
