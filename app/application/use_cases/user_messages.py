"""User-facing messages for the sales console."""


class UserMessages:
    """Centralized English user-facing messages."""

    # Lead fields
    BUSINESS_NAME_REQUIRED = "Business name is required"
    PHONE_NUMBER_REQUIRED = "Phone number is required"
    PHONE_NUMBER_INVALID = "Please enter a valid Canadian phone number"
    STREET_NUMBER_REQUIRED = "Street number is required"
    STREET_NUMBER_INVALID = "Street number must contain only numbers"
    STREET_NAME_REQUIRED = "Street name is required"
    POSTAL_CODE_REQUIRED = "Postal code is required"
    POSTAL_CODE_INVALID = "Please enter a valid Canadian postal code (e.g., A1A 1A1)"
    SOURCE_REQUIRED = "Lead source is required"
    SOURCE_INVALID = "Lead source must be GOVERNMENT or ADS"

    # Vendor fields
    LEGAL_NAME_REQUIRED = "Legal name is required"
    EMAIL_REQUIRED = "Email is required"
    EMAIL_INVALID = "Please enter a valid email address"
    LEAD_SELECTION_REQUIRED = "Please select a contacted lead to convert"

    # Wizard navigation
    JUMP_ONLY_FROM_REVIEW = "You can only jump back to a step from the review step"
    JUMP_ONLY_BACKWARDS = "You can only jump back to an earlier step"
    SUBMIT_ONLY_FROM_REVIEW = "The form can only be submitted from the review step"
    NOT_A_SELECT_STEP = "The current step does not select a lead"

    @staticmethod
    def submit_failed(kind: str, detail: str) -> str:
        """Generate the error shown on the review step after a failed submission."""
        if detail:
            return detail
        return f"Submission failed ({kind}). Please try again."
